"""hdltest command-line interface."""
