"""Room lifecycle errors.

Every error here is local to one connection: handlers translate it into
the client event named by ``event`` (or drop it when ``event`` is None).
"""


class KitchenError(Exception):
    event = 'error'

    def payload(self):
        return {'message': str(self)}


class CodeGenerationExhausted(KitchenError):
    def __init__(self, attempts: int):
        super().__init__(f'Could not generate a unique room code after {attempts} attempts')
        self.attempts = attempts


class InvalidRoomCode(KitchenError):
    event = 'invalidCode'

    def __init__(self, code):
        super().__init__(f'No room with code {code!r}')
        self.code = code

    def payload(self):
        return None


class RoomFull(KitchenError):
    event = 'roomFull'

    def __init__(self, code):
        super().__init__(f'Room {code} is full')
        self.code = code

    def payload(self):
        return None


class UnresolvableConnection(KitchenError):
    # Not reported to the client
    event = None

    def __init__(self, sid):
        super().__init__(f'Connection {sid} is not in any room')
        self.sid = sid


class MalformedPayload(KitchenError):
    event = None

    def __init__(self, event_name, reason):
        super().__init__(f'{event_name}: {reason}')
        self.event_name = event_name
        self.reason = reason
