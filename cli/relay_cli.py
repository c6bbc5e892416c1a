"""Interactive read-eval-print loop against a running relay."""

import logging
import sys
from typing import TextIO

import httpx

from .client import ChatAPIClient
from .config import CLIConfig

logger = logging.getLogger(__name__)

EXIT_COMMANDS = frozenset({"exit", "quit", "q"})
PROMPT = "> "


class RelayCLI:
    """Reads one line per message and prints the persona's answer.

    Streams are injectable so the loop can be driven from tests.
    """

    def __init__(
        self,
        config: CLIConfig,
        stdin: TextIO = sys.stdin,
        stdout: TextIO = sys.stdout,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.config = config
        self.stdin = stdin
        self.stdout = stdout
        self.client = ChatAPIClient(config, transport=transport)

    async def run(self) -> None:
        self._banner()
        try:
            while (line := self._prompt()) is not None:
                text = line.strip()
                if not text:
                    continue
                if text.lower() in EXIT_COMMANDS:
                    break
                try:
                    reply = await self.client.chat(line)
                except KeyboardInterrupt:
                    self._write("\n(cancelled, type 'exit' to leave)\n")
                    continue
                self._render(reply)
            self._write("Goodbye!\n")
        finally:
            await self.client.close()

    def _prompt(self) -> str | None:
        """Next input line without its newline, or ``None`` at end of input."""
        self._write(PROMPT)
        line = self.stdin.readline()
        if not line:
            self._write("\n")
            return None
        return line.rstrip("\r\n")

    def _render(self, reply: dict) -> None:
        if "error" in reply:
            logger.debug("Relay returned an error: %s", reply)
            self._write(f"\nError [{reply.get('code', 'UNKNOWN')}]: {reply['error']}\n\n")
            return

        lines = [reply["response"]]
        if reply.get("note"):
            lines.append(f"({reply['note']})")
        self._write("\n" + "\n".join(lines) + "\n\n")

    def _banner(self) -> None:
        self._write(
            "Persona Relay CLI\n"
            f"Relay:   {self.config.chat_url}\n"
            f"Session: {self.config.session_id}\n"
            "Type a message and press Enter; 'exit' or 'quit' leaves.\n\n"
        )

    def _write(self, text: str) -> None:
        self.stdout.write(text)
        self.stdout.flush()


async def main(
    host: str = "localhost",
    port: int = 3456,
    api_path: str = "/api/chat",
    session_id: str | None = None,
    debug: bool = False,
) -> None:
    """Configure logging, build the CLI config and run the loop.

    A fresh ``session_<random>`` key is minted unless *session_id* is
    given, so each run starts an empty conversation.
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    overrides = {"session_id": session_id} if session_id else {}
    config = CLIConfig(host=host, port=port, api_path=api_path, **overrides)
    await RelayCLI(config).run()
