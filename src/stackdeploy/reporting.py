"""
Console reporting for deployment progress.
"""

from abc import ABC, abstractmethod

import click
from colorama import Fore, Style, init

# Initialize colorama for cross-platform colored output
init()


class Reporter(ABC):
    """Sink for user-facing progress messages."""

    @abstractmethod
    def info(self, message: str) -> None:
        """Report progress."""
        pass

    @abstractmethod
    def success(self, message: str) -> None:
        """Report a completed stack operation."""
        pass

    @abstractmethod
    def warn(self, message: str) -> None:
        """Report a problem that does not stop the run."""
        pass

    @abstractmethod
    def error(self, message: str) -> None:
        """Report a failure."""
        pass


class NullReporter(Reporter):
    """Discard every message."""

    def info(self, message: str) -> None:
        pass

    def success(self, message: str) -> None:
        pass

    def warn(self, message: str) -> None:
        pass

    def error(self, message: str) -> None:
        pass

class ConsoleReporter(Reporter):
    """Print colorized progress lines to the terminal."""

    def info(self, message: str) -> None:
        click.echo(f"ℹ️  {message}")

    def success(self, message: str) -> None:
        click.echo(f"{Fore.GREEN}✅ {message}{Style.RESET_ALL}")

    def warn(self, message: str) -> None:
        click.echo(f"{Fore.YELLOW}⚠️  {message}{Style.RESET_ALL}")

    def error(self, message: str) -> None:
        click.echo(f"{Fore.RED}❌ {message}{Style.RESET_ALL}", err=True)
