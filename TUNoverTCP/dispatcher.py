import os
import sys
import signal
import asyncio
import logging
from TUNoverTCP import exceptions
from TUNoverTCP.launch_config import ResolvedConfig, Role


log = logging.getLogger(__name__)


class Dispatcher:
    TUNNEL_BINARY = './target/release/vpn'
    LOG_LEVEL_VARIABLE = 'RUST_LOG'
    FORWARDED_SIGNALS = (signal.SIGINT, signal.SIGTERM)
    # a windows console delivers ctrl+c to the child itself, and Popen.send_signal rejects SIGINT there
    CONSOLE_DELIVERED_SIGNALS = (signal.SIGINT,) if os.name == 'nt' else ()

    def __init__(self, config: ResolvedConfig):
        self.config = config

    @property
    def argv(self):
        return [self.TUNNEL_BINARY] + self.config.tunnel_arguments()

    @property
    def environment(self):
        """
        a copy of the current environment, with the log level for the tunnel engine.
        """
        environment = dict(os.environ)
        environment[self.LOG_LEVEL_VARIABLE] = self.config.log_level.value
        return environment

    def announce(self):
        address_label = 'Bind address' if self.config.role is Role.server else 'Server address'
        log.info(f'Starting VPN {self.config.role.value}...')
        log.info(f'{address_label}: {self.config.address}')
        log.info(f'Port: {self.config.port}')
        log.info(f'TUN interface: {self.config.tun_name}')
        log.info(f'TUN IP: {self.config.tun_ip}')

    def dispatch(self):
        """
        announce the configuration and hand the process over to the tunnel engine. does not return.
        """
        self.announce()
        if os.name == 'posix':
            self.replace()
        else:
            sys.exit(asyncio.run(self.spawn_and_wait()))

    def replace(self):
        """
        replace the current process image with the tunnel engine.
        """
        log.debug(f'exec {self.argv} ({self.LOG_LEVEL_VARIABLE}={self.config.log_level.value})')
        sys.stdout.flush()
        sys.stderr.flush()
        try:
            os.execve(self.TUNNEL_BINARY, self.argv, self.environment)
        except OSError as e:
            raise exceptions.ExecutionFailureError(self.TUNNEL_BINARY, e) from e

    def forward_signal(self, process, signum: int):
        if signum in self.CONSOLE_DELIVERED_SIGNALS:
            log.debug(f'signal {signum} reaches the tunnel engine through the console')
            return
        log.debug(f'forwarding signal {signum} to the tunnel engine (pid={process.pid})')
        process.send_signal(signum)

    async def spawn_and_wait(self):
        """
        for platforms that cannot replace the process image: run the tunnel engine as a child,
        pass interrupts on to it, and wait for it to exit.
        :return: the return code of the tunnel engine.
        """
        log.debug(f'spawning {self.argv} ({self.LOG_LEVEL_VARIABLE}={self.config.log_level.value})')
        try:
            process = await asyncio.create_subprocess_exec(*self.argv, env=self.environment)
        except OSError as e:
            raise exceptions.ExecutionFailureError(self.TUNNEL_BINARY, e) from e

        previous_handlers = {
            signum: signal.signal(signum, lambda signum, _: self.forward_signal(process, signum))
            for signum in self.FORWARDED_SIGNALS
        }
        try:
            return await process.wait()
        finally:
            for signum, handler in previous_handlers.items():
                signal.signal(signum, handler)
