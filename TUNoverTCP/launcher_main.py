import sys
import logging
import argparse
from TUNoverTCP import exceptions, launch_config
from TUNoverTCP.dispatcher import Dispatcher
from TUNoverTCP.launch_config import Role


log = logging.getLogger(__name__)

USAGE_ERROR_STATUS = 1


def setup_logging(level=logging.INFO):
    """
    informational lines go to stdout, warnings and errors to stderr.
    """
    formatter = logging.Formatter('[%(levelname)s] %(message)s')

    stdout_handler = logging.StreamHandler(sys.stdout)
    stdout_handler.addFilter(lambda record: record.levelno < logging.WARNING)
    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.WARNING)

    for handler in (stdout_handler, stderr_handler):
        handler.setFormatter(formatter)

    logging.basicConfig(level=level, handlers=[stdout_handler, stderr_handler])


def mode_description(role: Role, prog: str):
    descriptions = {
        'bind_addr': 'Address to bind the server',
        'server_addr': 'Address of the server to connect to',
        'port': 'Port to listen on' if role is Role.server else 'Port to connect to',
        'tun_ip': 'TUN interface IP',
        'my_ip': 'TUN interface IP for the client',
        'tun_name': 'TUN interface name',
    }
    names = launch_config.POSITIONAL_NAMES[role]
    lines = [
        f'{role.value.capitalize()} mode:',
        f'  {prog} {role.value} ' + ' '.join(f'[{name}]' for name in names),
    ]
    width = max(len(name) for name in names)
    for name, default in zip(names, launch_config.DEFAULTS[role]):
        lines.append(f'    {name:<{width}}: {descriptions[name]} (default: {default})')
    return '\n'.join(lines)


def build_usage_parser(prog: str = None):
    """
    only used to render the usage text. tokens are classified by launch_config.parse_tokens,
    since a role must come before any positional value and anything after it is taken verbatim.
    """
    parser = argparse.ArgumentParser(
        prog=prog,
        usage='%(prog)s [server | client] [options]',
        description='Resolve the tunnel configuration and start the VPN engine.',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.epilog = '\n\n'.join(mode_description(role, parser.prog) for role in Role)
    parser.add_argument('mode', choices=[role.value for role in Role], help='role of this tunnel endpoint')
    parser.add_argument('--debug', action='store_true', help='Enable debug logging (default)')
    parser.add_argument('--info', action='store_true', help='Enable info-level logging only')
    return parser


def exit_with_usage(error: exceptions.UsageError, prog: str = None):
    log.error(error)
    parser = build_usage_parser(prog)
    parser.print_help(sys.stderr)
    parser.exit(USAGE_ERROR_STATUS)


def run(argv, prog: str = None):
    """
    resolve the configuration from argv and start the tunnel engine in place of this process.
    :param argv: the command line, without the program name.
    :param prog: program name shown in the usage text.
    """
    try:
        config = launch_config.resolve_tokens(argv)
    except exceptions.UsageError as e:
        exit_with_usage(e, prog)

    try:
        Dispatcher(config).dispatch()
    except exceptions.ExecutionFailureError as e:
        log.error(e)
        sys.exit(e.exit_status)


def start_main():
    setup_logging()
    run(sys.argv[1:])


if __name__ == '__main__':
    start_main()
