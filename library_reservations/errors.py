class ReservationError(Exception):
    kind = "reservation_error"


class InvalidArgumentError(ReservationError, ValueError):
    kind = "invalid_argument"


class NotFoundError(ReservationError, LookupError):
    kind = "not_found"


class PreconditionFailedError(ReservationError, RuntimeError):
    kind = "precondition_failed"


class ConflictError(ReservationError, RuntimeError):
    kind = "conflict"


class InvalidStateError(ReservationError, RuntimeError):
    kind = "invalid_state"


class ConfigurationError(RuntimeError):
    pass


class EventLogError(RuntimeError):
    pass
