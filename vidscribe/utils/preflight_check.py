#!/usr/bin/env python3
"""Pre-flight environment validation for VidScribe.

Two checks are fatal for a run: ffmpeg must be on PATH and a Gemini API
key must be available. ``ensure_ready`` enforces both before any task
starts; ``run_preflight_checks`` prints the full report for ``--check``.
"""

import shutil
import subprocess
import sys
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from colorama import Fore, Style, init

from vidscribe.config.settings import API_KEY_ENV_VAR, resolve_api_key
from vidscribe.errors import SetupError

init()

FFMPEG_INSTALL_HELP = (
    "ffmpeg is required but not installed.\n\n"
    "Install it with:\n"
    "  macOS:    brew install ffmpeg\n"
    "  Ubuntu:   sudo apt install ffmpeg\n"
    "  Arch:     sudo pacman -S ffmpeg\n"
    "  Windows:  winget install ffmpeg\n"
)


class CheckStatus(Enum):
    """Status of a pre-flight check."""
    PASS = "PASS"
    FAIL = "FAIL"
    WARN = "WARN"


@dataclass
class CheckResult:
    """Result of a single pre-flight check."""
    name: str
    status: CheckStatus
    message: str
    details: Optional[List[str]] = None
    fatal: bool = False


def find_ffmpeg() -> Optional[str]:
    return shutil.which("ffmpeg")


def ensure_ready(api_key: Optional[str] = None) -> str:
    """
    Verify the fatal requirements and return the resolved API key.

    Raises:
        SetupError: If ffmpeg is missing or no API key is configured
    """
    if find_ffmpeg() is None:
        raise SetupError(FFMPEG_INSTALL_HELP)
    return resolve_api_key(api_key)


class PreflightChecker:
    """Environment checker behind ``vidscribe --check``."""

    def __init__(self, verbose: bool = False):
        self.verbose = verbose
        self.results: List[CheckResult] = []

    def run_all_checks(self) -> bool:
        """Run all pre-flight checks and return overall status."""
        print(f"\n{Fore.CYAN}VidScribe Pre-flight Environment Check{Style.RESET_ALL}")
        print("=" * 60)

        self._check_python_version()
        self._check_ffmpeg()
        self._check_api_key()

        self._display_results()

        return not any(r.fatal and r.status == CheckStatus.FAIL for r in self.results)

    def _check_python_version(self):
        version = sys.version_info
        version_str = f"{version.major}.{version.minor}.{version.micro}"
        if version >= (3, 9):
            self.results.append(CheckResult(
                name="Python Version",
                status=CheckStatus.PASS,
                message=f"Python {version_str} is supported"
            ))
        else:
            self.results.append(CheckResult(
                name="Python Version",
                status=CheckStatus.FAIL,
                message=f"Python {version_str} is not supported",
                details=["VidScribe requires Python 3.9 or newer"],
                fatal=True
            ))

    def _check_ffmpeg(self):
        ffmpeg_path = find_ffmpeg()
        if not ffmpeg_path:
            self.results.append(CheckResult(
                name="FFmpeg",
                status=CheckStatus.FAIL,
                message="FFmpeg not found in PATH",
                details=FFMPEG_INSTALL_HELP.strip().splitlines()[2:],
                fatal=True
            ))
            return

        details = [ffmpeg_path]
        try:
            result = subprocess.run(
                [ffmpeg_path, '-version'],
                capture_output=True,
                text=True,
                timeout=5
            )
            details.append(result.stdout.split('\n')[0])
        except (OSError, subprocess.SubprocessError) as e:
            details.append(f"could not query version: {e}")

        self.results.append(CheckResult(
            name="FFmpeg",
            status=CheckStatus.PASS,
            message="FFmpeg is installed",
            details=details if self.verbose else None
        ))

    def _check_api_key(self):
        try:
            resolve_api_key()
        except SetupError as e:
            self.results.append(CheckResult(
                name="Gemini API Key",
                status=CheckStatus.FAIL,
                message=f"{API_KEY_ENV_VAR} is not set",
                details=str(e).splitlines()[2:],
                fatal=True
            ))
            return

        self.results.append(CheckResult(
            name="Gemini API Key",
            status=CheckStatus.PASS,
            message=f"{API_KEY_ENV_VAR} is configured"
        ))

    def _display_results(self):
        print()

        failures = [r for r in self.results if r.status == CheckStatus.FAIL]
        warnings = [r for r in self.results if r.status == CheckStatus.WARN]
        passes = [r for r in self.results if r.status == CheckStatus.PASS]

        for result in passes:
            self._display_result(result, Fore.GREEN)
        for result in warnings:
            self._display_result(result, Fore.YELLOW)
        for result in failures:
            self._display_result(result, Fore.RED)

        print("\n" + "=" * 60)
        if failures:
            fatal_count = sum(1 for r in failures if r.fatal)
            print(f"{Fore.RED}✗ {len(failures)} check(s) failed ({fatal_count} fatal){Style.RESET_ALL}")
            if fatal_count > 0:
                print(f"{Fore.RED}VidScribe cannot run until these issues are resolved.{Style.RESET_ALL}")
        elif warnings:
            print(f"{Fore.YELLOW}⚠ All checks passed with {len(warnings)} warning(s){Style.RESET_ALL}")
        else:
            print(f"{Fore.GREEN}✓ All checks passed!{Style.RESET_ALL}")
        print("=" * 60 + "\n")

    def _display_result(self, result: CheckResult, color: str):
        status_symbol = {
            CheckStatus.PASS: "✓",
            CheckStatus.FAIL: "✗",
            CheckStatus.WARN: "⚠",
        }[result.status]

        print(f"{color}{status_symbol} {result.name}: {result.message}{Style.RESET_ALL}")

        if result.details and (self.verbose or result.status != CheckStatus.PASS):
            for detail in result.details:
                print(f"  {detail}" if detail else "")


def run_preflight_checks(verbose: bool = False) -> bool:
    """Run pre-flight checks; True if nothing fatal failed."""
    checker = PreflightChecker(verbose=verbose)
    return checker.run_all_checks()
