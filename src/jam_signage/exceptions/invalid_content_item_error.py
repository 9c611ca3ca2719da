from jam_signage.exceptions import jam_signage_exception


class InvalidContentItemError(jam_signage_exception.JamSignageException):

    def __init__(self, record: object, reason: str):
        self.record = record
        self.reason = reason
        self.message = f"Invalid content record: {reason}."
        super().__init__(self.message)
