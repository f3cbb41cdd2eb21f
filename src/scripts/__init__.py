"""
Package initialization for the scripts module.

Command line entry points: run_checks runs the built-in check suite and
count_types prints the type histogram of a file of JSON values.
"""
