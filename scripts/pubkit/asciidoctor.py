"""
Asciidoctor conversion engine.

Thin handle over the asciidoctor-epub3 command line. Options mirror the
Asciidoctor API: backend, safe mode, attributes. Output lands next to
the source document.
"""

import os
import subprocess


class AsciidoctorError(Exception):
    """The converter ran and reported a failure."""

    def __init__(self, returncode, stderr=""):
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip().splitlines()[-1] if stderr.strip() else "no output"
        super().__init__(f"asciidoctor exited {returncode}: {detail}")


class AsciidoctorNotFound(Exception):
    """The converter executable is not installed."""
    pass


class Asciidoctor:
    def __init__(self, executable="asciidoctor-epub3", requires=()):
        self.executable = executable
        self.requires = list(requires)

    def command(self, source, options):
        cmd = [self.executable]
        if options.get("backend"):
            cmd.extend(["-b", options["backend"]])
        if options.get("safe"):
            cmd.extend(["-S", options["safe"]])
        for lib in self.requires:
            cmd.extend(["-r", lib])

        for name, value in options.get("attributes", {}).items():
            if value is True:
                cmd.extend(["-a", name])
            else:
                cmd.extend(["-a", f"{name}={value}"])

        cmd.append(source)
        return cmd

    def convert_file(self, source, options, env=None):
        """
        Convert one document. Raises AsciidoctorError on a non-zero exit.

        `env` entries are layered over the current environment.
        """
        child_env = dict(os.environ)
        if env:
            child_env.update(env)

        try:
            result = subprocess.run(
                self.command(source, options),
                capture_output=True,
                text=True,
                env=child_env,
            )
        except FileNotFoundError:
            raise AsciidoctorNotFound(f"{self.executable} not found on PATH")

        if result.returncode != 0:
            raise AsciidoctorError(result.returncode, result.stderr or "")
        return result
