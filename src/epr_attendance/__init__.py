"""EPR attendance & payroll reconciliation package.

This package is organized by feature modules (attendance, daily, payroll,
reasons, ...) with a thin Flask controller layer on top of pure services.
The reconciliation core itself performs no I/O.
"""

__version__ = "1.0.0"
