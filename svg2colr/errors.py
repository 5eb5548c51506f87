class Svg2ColrError(Exception):
    pass


class InvalidColor(Svg2ColrError, ValueError):
    def __init__(self, value):
        super().__init__(f"invalid color {value!r}")
        self.value = value


class CompilerError(Svg2ColrError):
    """An external compiler step failed. Fatal for the whole run."""

    def __init__(self, message, command=None, stderr=None):
        if stderr:
            message = f"{message}: {stderr.strip()}"
        super().__init__(message)
        self.command = command
        self.stderr = stderr
