"""Baseline Resolver - Breaking-change baseline tooling for app packages.

Provides:
- Baseline version resolution (latest published vs. pinned)
- Baseline artifact download into a symbols directory
- AppSourceCop.json compatibility manifest patching
"""

__version__ = "0.1.0"
