"""install-deps — platform-aware installer for cpp-ethereum build dependencies."""

__version__ = "0.1.0"
