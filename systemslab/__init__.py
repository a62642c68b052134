"""Systems-programming tools: simulated heap, trace files, cycle timing, robust I/O, host lookup and a CGI adder."""

__version__ = "0.1.0"

__all__ = ["adder", "cycles", "hostinfo", "memlib", "rio", "traces"]