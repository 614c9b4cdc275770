"""Stored procedure generator

Reads table metadata from a database and generates insert, update and delete
stored procedures for every table.
"""

__version__ = "0.1.0"
