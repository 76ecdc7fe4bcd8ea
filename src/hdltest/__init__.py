"""hdltest - discover and run dbt HDL simulation test cases."""

__version__ = "0.1.0"
