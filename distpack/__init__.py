"""distpack: build a project from source control into a native package.

Core design goals:
- One strictly sequential run: checkout, build, stage, package, publish
- Host platform decides the package format and init-script flavor
- Every external tool invocation goes through one mockable runner
- Centralized logging
"""

__all__ = []
