from typing import Any, Callable, Optional

from base_classes import LineReader
from utils.output_utils import OutputHandler
from utils.input_utils import InputHandler
from utils.logging_utils import LoggingHandler
from utils.editor_utils import ExternalEditor


class UtilsHandler:
    """
    Container for the I/O services shared by every prompt.
    Services are created on first use; injected collaborators replace the
    defaults (stdin/stdout/stderr, getpass, the external editor).
    """

    def __init__(
            self,
            config,
            reader: Optional[LineReader] = None,
            masked_reader: Optional[LineReader] = None,
            editor: Optional[Callable[[str], str]] = None,
            stdout: Optional[Any] = None,
            stderr: Optional[Any] = None
    ):
        self.config = config
        self._reader = reader
        self._masked_reader = masked_reader
        self._editor = editor
        self._stdout = stdout
        self._stderr = stderr
        self._output = None
        self._input = None
        self._logger = None

    @property
    def output(self) -> OutputHandler:
        if self._output is None:
            self._output = OutputHandler(self.config)
            if self._stdout is not None:
                self._output.set_stream(self._stdout)
            if self._stderr is not None:
                self._output.set_error_stream(self._stderr)
        return self._output

    @property
    def input(self) -> InputHandler:
        if self._input is None:
            self._input = InputHandler(self.config, self.output, reader=self._reader,
                                       masked_reader=self._masked_reader)
        return self._input

    @property
    def logger(self) -> LoggingHandler:
        if self._logger is None:
            self._logger = LoggingHandler(self.config, self.output)
        return self._logger

    @property
    def editor(self) -> Callable[[str], str]:
        if self._editor is None:
            self._editor = ExternalEditor(self.config, self.logger)
        return self._editor
