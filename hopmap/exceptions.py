from typing import Optional


class HopmapException(Exception):
    def pretty_print_str(self):
        err = f"[bold][red]HopmapException: {str(self)}[/red][/bold]"
        return err


class BadConfigException(HopmapException):
    def pretty_print_str(self):
        err = f"[red][bold]:x: BadConfigException:[/bold] {str(self)}[/red]"
        err += "\n[bold][red]Check the [flags] section of your config file and any HOPMAP_* environment variables.[/red][/bold]"
        return err


class ReferenceDataException(HopmapException):
    def pretty_print_str(self):
        err = f"[red][bold]:x: ReferenceDataException:[/bold] {str(self)}[/red]"
        err += "\n[bold][red]Please ensure the city and airport directories exist and are valid JSON or CSV.[/red][/bold]"
        return err


class ProviderException(HopmapException):
    """A geolocation provider failed to return a usable coordinate pair."""

    def __init__(self, message, provider: Optional[str] = None):
        super().__init__(message)
        self.provider = provider


class RateLimitedException(ProviderException):
    def __init__(self, message, provider: Optional[str] = None, retry_after: Optional[float] = None):
        super().__init__(message, provider=provider)
        self.retry_after = retry_after


class InvalidTargetException(HopmapException):
    def pretty_print_str(self):
        err = f"[red][bold]:x: InvalidTargetException:[/bold] {str(self)}[/red]"
        err += "\n[bold][red]The trace target must be an IPv4 or IPv6 address.[/red][/bold]"
        return err


class ProbeFailedException(HopmapException):
    def __init__(self, message, returncode: Optional[int] = None):
        super().__init__(message)
        self.returncode = returncode

    def pretty_print_str(self):
        err = f"[red][bold]:x: ProbeFailedException:[/bold] {str(self)}[/red]"
        if self.returncode is not None:
            err += f"\n[bold][red]traceroute exited with status {self.returncode}.[/red][/bold]"
        return err
