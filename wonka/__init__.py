"""Task types, tmux session control and a rapid-failure circuit breaker for agent orchestration."""

__version__ = "0.1.0"
__all__ = ["types", "tmux", "watchdog"]