import enum
import logging
from dataclasses import dataclass
from typing import Iterable, Sequence
from TUNoverTCP import exceptions


log = logging.getLogger(__name__)


class Role(enum.Enum):
    server = 'server'
    client = 'client'


class LogLevel(enum.Enum):
    debug = 'debug'
    info = 'info'


class TokenKind(enum.Enum):
    role = enum.auto()
    flag = enum.auto()
    positional = enum.auto()


LOG_LEVEL_FLAGS = {
    '--debug': LogLevel.debug,
    '--info': LogLevel.info,
}

# indexed by position: address, port, tun ip/cidr, tun name
DEFAULTS = {
    Role.server: ('0.0.0.0', '12345', '10.0.0.1/24', 'tun0'),
    Role.client: ('127.0.0.1', '12345', '10.0.0.2/24', 'tun1'),
}

POSITIONAL_NAMES = {
    Role.server: ('bind_addr', 'port', 'tun_ip', 'tun_name'),
    Role.client: ('server_addr', 'port', 'my_ip', 'tun_name'),
}


@dataclass(frozen=True)
class ResolvedConfig:
    role: Role
    address: str
    port: str
    tun_ip: str
    tun_name: str
    log_level: LogLevel = LogLevel.debug

    def tunnel_arguments(self):
        """
        the positional arguments the tunnel engine receives, in its fixed order.
        """
        return [self.role.value, self.address, self.port, self.tun_ip, self.tun_name]


def classify(token: str, role_selected: bool):
    """
    decide what a single command line token means at this point of the scan.
    a role token only selects a role while none is selected yet, afterwards it is plain data.
    :param token: the raw token.
    :param role_selected: whether a role was already selected earlier in the scan.
    :return: the TokenKind of the token.
    """
    if not role_selected and token in (role.value for role in Role):
        return TokenKind.role
    if token in LOG_LEVEL_FLAGS:
        return TokenKind.flag
    return TokenKind.positional


def parse_tokens(tokens: Iterable[str]):
    """
    single left to right pass over the command line tokens.
    :param tokens: the command line, without the program name.
    :return: tuple of (role, log_level, positional values in order of appearance).
    """
    role = None
    log_level = LogLevel.debug
    positional = []

    for token in tokens:
        kind = classify(token, role is not None)
        log.debug(f'token {token!r} classified as {kind.name}')

        if kind is TokenKind.role:
            role = Role(token)
        elif kind is TokenKind.flag:
            log_level = LOG_LEVEL_FLAGS[token]
        elif role is None:
            raise exceptions.UnexpectedTokenBeforeRoleError(token)
        else:
            positional.append(token)

    if role is None:
        raise exceptions.MissingModeError()

    return role, log_level, positional


def resolve(role: Role, positional: Sequence[str], log_level: LogLevel = LogLevel.debug):
    """
    overlay the supplied positional values on the defaults of the role, by index.
    values are taken verbatim, only missing or empty slots fall back to the default.
    """
    try:
        role = Role(role)
    except (ValueError, TypeError) as e:
        raise exceptions.InvalidRoleError(role) from e

    values = [
        positional[index] if index < len(positional) and positional[index] else default
        for index, default in enumerate(DEFAULTS[role])
    ]
    if len(positional) > len(values):
        log.debug(f'ignoring extra arguments: {list(positional[len(values):])}')

    return ResolvedConfig(role, *values, log_level=log_level)


def resolve_tokens(tokens: Iterable[str]):
    role, log_level, positional = parse_tokens(tokens)
    return resolve(role, positional, log_level)
