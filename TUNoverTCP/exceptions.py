class UsageError(Exception):
    pass


class MissingModeError(UsageError):
    def __init__(self):
        super(MissingModeError, self).__init__('Missing mode (server or client).')


class UnexpectedTokenBeforeRoleError(UsageError):
    def __init__(self, token: str):
        super(UnexpectedTokenBeforeRoleError, self).__init__("You must specify either 'server' or 'client'.")
        self.token = token


class InvalidRoleError(UsageError):
    def __init__(self, role):
        super(InvalidRoleError, self).__init__(f'Invalid mode: {role}')
        self.role = role


class ExecutionFailureError(Exception):
    BINARY_NOT_FOUND = 127
    BINARY_NOT_EXECUTABLE = 126

    def __init__(self, binary: str, reason: OSError):
        super(ExecutionFailureError, self).__init__(f'failed to launch {binary}: {reason.strerror or reason}')
        self.binary = binary
        self.exit_status = self.BINARY_NOT_FOUND if isinstance(reason, FileNotFoundError) else self.BINARY_NOT_EXECUTABLE
