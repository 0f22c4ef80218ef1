import os
import signal
import logging
import subprocess
import threading

import psutil

logger = logging.getLogger(__name__)


def get_clean_subprocess_env(extra_env=None):
    """
    Returns a copy of os.environ with the system binary directories on PATH.
    Optionally merges in extra_env dict.
    """
    env = os.environ.copy()

    # Ensure common system directories are in PATH if not already present
    path_parts = env.get('PATH', '').split(':') if env.get('PATH') else []
    for sys_path in ['/usr/bin', '/usr/local/bin', '/bin']:
        if sys_path not in path_parts and os.path.isdir(sys_path):
            path_parts.append(sys_path)
    env['PATH'] = ':'.join(path_parts)

    if extra_env:
        env.update(extra_env)
    return env


class _PipeReader(threading.Thread):
    """Drains one pipe into memory until EOF."""

    def __init__(self, stream, name):
        super().__init__(name=name, daemon=True)
        self.stream = stream
        self.chunks = []

    def run(self):
        try:
            for chunk in iter(lambda: self.stream.read1(4096), b''):
                self.chunks.append(chunk)
        except (OSError, ValueError) as e:
            logger.debug(f"Pipe reader {self.name} stopped: {e}")
        finally:
            self.stream.close()

    def text(self):
        return b''.join(self.chunks).decode('utf-8', errors='replace')


class ProcessManager:
    """
    Launches a process with captured stdout/stderr and drains both pipes on
    background threads from the moment it starts, so a chatty child can never
    block on a full pipe while we wait for it.
    """
    def __init__(self, cmd, env=None, cwd=None):
        self.cmd = cmd
        # Default to cleaned environment if None to prevent AppImage variable inheritance
        if env is None:
            self.env = get_clean_subprocess_env()
        else:
            self.env = env
        self.cwd = cwd
        self.proc = None
        self.process_group_pid = None
        self._readers = []
        self._start_process()

    def _start_process(self):
        self.proc = subprocess.Popen(
            self.cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            env=self.env,
            cwd=self.cwd,
            start_new_session=True
        )
        try:
            self.process_group_pid = os.getpgid(self.proc.pid)
        except OSError:
            self.process_group_pid = None
        self._readers = [
            _PipeReader(self.proc.stdout, 'stdout-reader'),
            _PipeReader(self.proc.stderr, 'stderr-reader'),
        ]
        for reader in self._readers:
            reader.start()

    def wait(self, timeout=None):
        """Wait for exit. Raises subprocess.TimeoutExpired when the bound elapses."""
        return self.proc.wait(timeout=timeout)

    def cancel(self, timeout_kill=1):
        """
        Forcibly kill the process, its process group and any children it spawned.
        """
        if not self.proc:
            return
        children = []
        try:
            children = psutil.Process(self.proc.pid).children(recursive=True)
        except (psutil.NoSuchProcess, psutil.AccessDenied):
            pass
        try:
            self.proc.kill()
        except OSError:
            pass
        # Kill process group if possible
        if self.process_group_pid:
            try:
                os.killpg(self.process_group_pid, signal.SIGKILL)
            except OSError:
                pass
        # Children that left the group (wineserver may daemonize)
        for child in children:
            try:
                child.kill()
            except (psutil.NoSuchProcess, psutil.AccessDenied):
                continue
        try:
            self.proc.wait(timeout=timeout_kill)
        except subprocess.TimeoutExpired:
            logger.warning(f"Process {self.proc.pid} did not exit after SIGKILL")

    def collect_output(self, timeout=1.0):
        """
        Return (stdout, stderr) read so far. Waits up to timeout for the readers
        to reach EOF; output from a killed process is whatever was buffered.
        Each reader closes its pipe on EOF, including one still running here
        because a detached grandchild holds the pipe open.
        """
        for reader in self._readers:
            reader.join(timeout=timeout)
            if reader.is_alive():
                logger.warning(f"{reader.name} still open after {timeout:g}s, returning partial output")
        return self._readers[0].text(), self._readers[1].text()

    @property
    def returncode(self):
        return self.proc.returncode if self.proc else None
