class InvalidData(Exception):
    notraceback = True
    pass


class ConfigurationError(Exception):
    pass


class BadFormatError(InvalidData):
    def __init__(self, line_number, line, reason):
        self.line_number = line_number
        self.line = line
        self.reason = reason
        super().__init__(
            "Couldn't parse line #{}: {} ({!r})".format(line_number, reason, line)
        )


class ChainEndMismatchError(BadFormatError):
    def __init__(self, line_number, line, side, expected, actual):
        self.side = side
        self.expected = expected
        self.actual = actual
        reason = "should end chain at {} position {}, but ended at position {}".format(
            side, expected, actual
        )
        super().__init__(line_number, line, reason)


class LiftoverFailure(InvalidData):
    pass


class UnorderedInputError(ValueError):
    pass
