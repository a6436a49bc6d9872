"""
Checkout Kernel

The policy-and-pricing core of the corporate delivery checkout:
- Typed, code-carrying exceptions for programming errors
- Structured JSON logging with request-scoped context
- Immutable domain value objects (requests, vendors, reasons, outcomes)
- An injectable clock so that engines never read wall-clock time
"""

__version__ = "0.1.0"
