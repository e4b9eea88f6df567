"""Extractors that pull embedded assets out of a PDF."""

import asyncio
import shutil
from abc import abstractmethod
from contextlib import suppress
from pathlib import Path

from docvision.logging.logger import Log
from docvision.pdf.base import BaseExtractionTool
from docvision.pdf.drawing_extractor import DrawingVectorTool
from docvision.pdf.exceptions import NativeToolError, ToolUnavailableError


class NativeExtractionTool(BaseExtractionTool):
    """A command-line extractor writing zero or more files into a directory."""

    executable: str = ""

    @property
    def name(self) -> str:  # type: ignore[override]
        return self.executable

    def is_available(self) -> bool:
        return shutil.which(self.executable) is not None

    @abstractmethod
    def arguments(self, pdf_path: Path, output_dir: Path) -> list[str]:
        """Command-line arguments following the executable."""

    async def run(self, pdf_path: Path, output_dir: Path) -> None:
        """Run the tool to completion; kill it if the caller is cancelled.

        Raises:
            ToolUnavailableError: if the executable is not on PATH.
            NativeToolError: on a non-zero exit status.
        """
        executable = shutil.which(self.executable)
        if executable is None:
            raise ToolUnavailableError(f"{self.executable} is not installed")
        process = await asyncio.create_subprocess_exec(
            executable,
            *self.arguments(pdf_path, output_dir),
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            _, stderr = await process.communicate()
        except asyncio.CancelledError:
            with suppress(ProcessLookupError):
                process.kill()
            await process.wait()
            Log.warning(f"{self.executable} was stopped before finishing")
            raise
        if process.returncode != 0:
            message = stderr.decode(errors="replace").strip()
            raise NativeToolError(
                f"{self.executable} exited with {process.returncode}: {message}"
            )


class PdfImagesTool(NativeExtractionTool):
    """Bitmap extractor from poppler-utils; writes embedded-NNN.png files."""

    executable = "pdfimages"

    def arguments(self, pdf_path: Path, output_dir: Path) -> list[str]:
        return ["-png", str(pdf_path), str(output_dir / "embedded")]


def default_tools() -> list[BaseExtractionTool]:
    return [PdfImagesTool(), DrawingVectorTool()]
