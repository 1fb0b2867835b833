#!/usr/bin/env python3
"""
Compute the Whisper log-mel spectrogram of an audio file.

Usage:
    logmel speech.wav --output speech_mel.npy
    logmel speech.wav --config configs/whisper.yaml --threads 8 --log-file logs/logmel.log
"""

import argparse
import logging
import time
from pathlib import Path
from typing import List, Optional

import numpy as np
from rich.console import Console
from rich.table import Table
from rich.panel import Panel
from rich import box

from .audio import load_audio
from .config import MelConfig, load_config
from .exceptions import LogMelError
from .filters import mel_filterbank
from .spectrogram import MelSpectrogram, whisper_log_mel
from .utils.logging import setup_logging

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='logmel',
        description="Compute a Whisper-style log-mel spectrogram"
    )
    parser.add_argument('audio', type=str, help='Mono audio file at the configured sample rate')
    parser.add_argument('--config', type=str, default=None, help='YAML configuration file')
    parser.add_argument('--output', type=str, default=None,
                        help='Output .npy path (default: <audio>_mel.npy)')
    parser.add_argument('--threads', type=int, default=None, help='Number of frame workers')
    parser.add_argument('--no-pad', action='store_true',
                        help='Do not pad/trim the audio to one chunk')
    parser.add_argument('--log-file', type=str, default=None, help='Write detailed logs here')
    parser.add_argument('--verbose', action='store_true', help='Debug-level logging')
    return parser


def display_summary(mel: MelSpectrogram, config: MelConfig, elapsed: float, output: Path):
    """Display a summary table of the computed features."""
    values = mel.data
    table = Table(title="Log-Mel Spectrogram", box=box.ROUNDED)
    table.add_column("Property", style="bold")
    table.add_column("Value", justify="right")

    table.add_row("Shape", f"{mel.n_mel} x {mel.n_len}")
    table.add_row("Sample rate", f"{config.sample_rate} Hz")
    table.add_row("n_fft / hop", f"{config.n_fft} / {config.hop_length}")
    table.add_row("Threads", str(config.n_threads))
    if values.size:
        table.add_row("Min", f"{values.min():.4f}")
        table.add_row("Max", f"{values.max():.4f}")
        table.add_row("Mean", f"{values.mean():.4f}")
    table.add_row("Time", f"{elapsed * 1000:.1f} ms")
    table.add_row("Output", str(output))

    console.print(table)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logger = setup_logging(
        log_file=args.log_file,
        level=logging.DEBUG if args.verbose else logging.INFO
    )

    audio_path = Path(args.audio)
    output = Path(args.output) if args.output else audio_path.with_name(f"{audio_path.stem}_mel.npy")

    try:
        config = load_config(args.config) if args.config else MelConfig()
        if args.threads is not None:
            config.n_threads = args.threads
        logger.info(f"Config: {config.to_dict()}")

        audio = load_audio(audio_path, config.sample_rate)
        filters = mel_filterbank(config.sample_rate, config.n_fft, config.n_mels)

        start = time.time()
        with console.status(f"[bold blue]Computing log-mel for {audio_path.name}..."):
            mel = whisper_log_mel(audio, config=config, filters=filters, pad=not args.no_pad)
        elapsed = time.time() - start

        output.parent.mkdir(parents=True, exist_ok=True)
        np.save(output, mel.matrix)

    except (LogMelError, ValueError, OSError) as e:
        # OSError covers missing input files and unwritable outputs
        logger.error(f"{audio_path}: {e}")
        console.print(f"[bold red]Error: {e}[/bold red]")
        return 1

    logger.info(f"Saved {mel.n_mel} x {mel.n_len} matrix to {output}")

    display_summary(mel, config, elapsed, output)
    console.print(Panel.fit(
        "[bold green]Log-mel spectrogram saved![/bold green]",
        border_style="green"
    ))
    return 0


if __name__ == '__main__':
    raise SystemExit(main())
