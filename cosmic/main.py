"""Command-line entry point for the cosmology distance calculator."""
from __future__ import annotations

import argparse
import logging
import re
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, TextIO

import yaml

from cosmic.data_loaders.redshift_loader import ParameterTable, RedshiftBatch
from cosmic.models.cosmology import Cosmology
from cosmic.reporting.formatters import format_html, format_long, write_batch_report
from cosmic.utils.constants import (
    CLI_DEFAULT_H0,
    CLI_DEFAULT_OMEGA_LAMBDA,
    CLI_DEFAULT_OMEGA_MATTER,
    COSMO_CONSTANTS_VERSION,
)
from cosmic.utils.logging_config import (
    StructuredLogger,
    collect_environment_metadata,
    compute_sha256,
)
from cosmic.utils.validation import (
    ConfigValidationError,
    parse_number,
    require_existing_file,
    validate_cosmology,
    validate_redshift,
)

VERSION = "2.1.0"

BANNER = (
    f"cosmic version {VERSION}\n"
    "cosmic comes with ABSOLUTELY NO WARRANTY; for details\n"
    "see the accompanying license.  This is free software,\n"
    "and you are welcome to redistribute it under certain\n"
    "conditions; see the bundled license for details. Invoke\n"
    "this program with \"--quiet\" or \"quiet=yes\" to suppress\n"
    "this message.\n"
)

_LEGACY_VALUE_OPTIONS = {
    'h': '--h0',
    'm': '--omega-m',
    'l': '--omega-l',
    'z': '--redshift',
    'batch': '--batch',
    'outfile': '--outfile',
    'config': '--config',
}
_LEGACY_SWITCHES = ('quiet', 'prompt', 'html', 'help', 'version')
_LEGACY_FLAG = re.compile(r'^-+(no)?(quiet|prompt|html|help|version)$')


def _strip_quotes(value: str) -> str:
    if value[:1] in ('"', "'"):
        value = value[1:]
    if value[-1:] in ('"', "'"):
        value = value[:-1]
    return value


def _switch_option(name: str, enabled: bool) -> List[str]:
    if name in ('help', 'version'):
        return [f'--{name}'] if enabled else []
    return [f'--{name}'] if enabled else [f'--no-{name}']


def translate_legacy_args(argv: Sequence[str]) -> List[str]:
    """Rewrite ``key=value`` and ``-quiet`` style arguments as argparse options.

    Tokens that are already long options, or that are not recognised, are
    passed through so argparse can report them.
    """
    translated: List[str] = []
    for token in argv:
        if not token.startswith('--') and '=' in token:
            key, _, value = token.lstrip('-').partition('=')
            value = _strip_quotes(value)
            if key in _LEGACY_VALUE_OPTIONS:
                translated.extend([_LEGACY_VALUE_OPTIONS[key], value])
                continue
            if key in _LEGACY_SWITCHES:
                flag = value[:1].lower()
                if flag in ('y', 'n'):
                    translated.extend(_switch_option(key, flag == 'y'))
                    continue
        match = _LEGACY_FLAG.match(token)
        if match and not token.startswith('--'):
            translated.extend(_switch_option(match.group(2), match.group(1) is None))
            continue
        translated.append(token)
    return translated


def _safe_load_yaml(path):
    with open(path, 'r', encoding='utf-8') as handle:
        loaded = yaml.safe_load(handle)
    if loaded is None:
        return {}
    if not isinstance(loaded, dict):
        raise ConfigValidationError(
            f"YAML file {path} must contain a mapping at the top level"
        )
    return loaded


def _load_configuration(config_path) -> Dict[str, Any]:
    if config_path is None:
        return {'cosmology': {}, 'run': {}}
    resolved = require_existing_file(config_path, description='configuration file')
    config_data = _safe_load_yaml(resolved)
    for name in ('cosmology', 'run'):
        section = config_data.get(name)
        if section is None:
            config_data[name] = {}
        elif not isinstance(section, dict):
            raise ConfigValidationError(
                f"Section '{name}' in {resolved} must be a mapping"
            )
    config_data['config_path'] = str(resolved)
    return config_data


def _build_parsers():
    base_parser = argparse.ArgumentParser(add_help=False)
    base_parser.add_argument(
        '--config',
        type=str,
        default=None,
        help='Path to a YAML configuration file'
    )

    parser = argparse.ArgumentParser(
        prog='cosmic',
        description='Distances and times in a matter + vacuum energy + curvature cosmology',
        parents=[base_parser]
    )
    parser.add_argument('-H', '--h0', type=float,
                        help=f'Hubble constant in km/s/Mpc (default {CLI_DEFAULT_H0:g})')
    parser.add_argument('-m', '--omega-m', type=float,
                        help=f'Omega matter (default {CLI_DEFAULT_OMEGA_MATTER:g})')
    parser.add_argument('-l', '--omega-l', type=float,
                        help=f'Omega lambda (default {CLI_DEFAULT_OMEGA_LAMBDA:g})')
    parser.add_argument('-z', '--redshift', type=float,
                        help='Single redshift for quick mode')
    parser.add_argument('--quiet', action=argparse.BooleanOptionalAction,
                        help='Suppress the version banner')
    parser.add_argument('--prompt', action=argparse.BooleanOptionalAction,
                        help='Prompt for the cosmological parameters')
    parser.add_argument('--html', action=argparse.BooleanOptionalAction,
                        help='Format reports as HTML')
    parser.add_argument('--batch', type=str,
                        help='Run in batch mode using the redshifts in this file')
    parser.add_argument('--outfile', type=str,
                        help='Output file for batch mode results')
    parser.add_argument('--table', type=str,
                        help='Parameter table (H0, Omega_m, Omega_L, N, redshifts) to evaluate')
    parser.add_argument('--table-out', type=str,
                        help='CSV output file for --table')
    parser.add_argument('--save-events', action=argparse.BooleanOptionalAction,
                        help='Write JSONL run events and metadata under the log directory')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Show informational run events on stderr')
    parser.add_argument('--version', action='version', version=f'cosmic version {VERSION}')
    return base_parser, parser


def prompt_for_param(description: str, default: float, stdin: TextIO, stdout: TextIO,
                     stderr: TextIO) -> float:
    """Ask for a number, returning ``default`` on an empty answer or end of input."""
    while True:
        stdout.write(f"{description} ({default:g}): ")
        stdout.flush()
        line = stdin.readline()
        text = line.strip()
        if not text:
            return default
        value = parse_number(text)
        if value is not None:
            return value
        stderr.write("  Not a valid number\n")


def get_cosmology_from_user(cosmo: Cosmology, stdin: TextIO, stdout: TextIO,
                            stderr: TextIO) -> None:
    """Prompt for H0, Omega_m and Omega_lambda, re-asking until they are usable."""
    while True:
        H0 = prompt_for_param("Hubble constant", cosmo.H0, stdin, stdout, stderr)
        if H0 > 0:
            break
        stderr.write("  The Hubble constant must be > 0\n")
    while True:
        omega_m = prompt_for_param("Omega matter", cosmo.omega_m, stdin, stdout, stderr)
        if omega_m >= 0:
            break
        stderr.write("  Omega matter must be >= 0\n")
    omega_l = prompt_for_param("Omega lambda", cosmo.omega_l, stdin, stdout, stderr)
    cosmo.set_cosmology(H0, omega_m, omega_l)


def _render(cosmo: Cosmology, html: bool) -> str:
    return format_html(cosmo) if html else format_long(cosmo)


def run_interactive(cosmo: Cosmology, html: bool, stdin: TextIO, stdout: TextIO,
                    stderr: TextIO) -> int:
    """Read redshifts until end of input, printing a report for each one."""
    reported = 0
    while True:
        stdout.write("redshift (ctrl-D to quit): ")
        stdout.flush()
        line = stdin.readline()
        if not line:
            break
        for token in line.split():
            z = parse_number(token)
            if z is None:
                stderr.write("Redshift must be numeric\n")
                continue
            if z < 0:
                stderr.write("  The redshift must be a number > 0.\n")
                # the rest of the line is discarded
                break
            cosmo.set_redshift(z)
            stdout.write("\n" + _render(cosmo, html) + "\n")
            reported += 1
    stdout.write("\n")
    return reported


def _run_batch(args, cosmo: Cosmology, run_logger: StructuredLogger, stdout: TextIO) -> int:
    try:
        batch = RedshiftBatch(args.batch)
    except ConfigValidationError as exc:
        run_logger.log_event(
            'batch.error',
            {'file': args.batch, 'error': str(exc), 'line': getattr(exc, 'line', None)},
            level=logging.ERROR,
            message=f"{exc}\nExiting with no further output",
        )
        return 1

    stdout.write(f"Running in batch mode. Output will be in {args.outfile}\n")
    try:
        with open(args.outfile, 'w', encoding='utf-8') as handle:
            frame = write_batch_report(handle, cosmo, batch.redshifts)
    except OSError as exc:
        run_logger.log_event(
            'batch.output_error',
            {'outfile': args.outfile, 'error': str(exc)},
            level=logging.ERROR,
            message=f"Error opening output file: {args.outfile}",
        )
        return 1

    if run_logger.persist:
        run_logger.save_dataframe('batch.csv', frame)
    summary = batch.summary()
    summary['outfile'] = args.outfile
    summary['checksum'] = compute_sha256(Path(batch.source_file))
    run_logger.log_event(
        'batch.complete',
        summary,
        message=f"Batch: {len(frame)} redshifts written to {args.outfile}",
    )
    return 0


def _run_table(args, run_logger: StructuredLogger) -> int:
    try:
        table = ParameterTable(args.table)
    except ConfigValidationError as exc:
        run_logger.log_event(
            'table.error',
            {'file': args.table, 'error': str(exc)},
            level=logging.ERROR,
            message=f"Parameter table error: {exc}",
        )
        return 1
    try:
        frame = table.write_csv(args.table_out)
    except OSError as exc:
        run_logger.log_event(
            'table.output_error',
            {'outfile': args.table_out, 'error': str(exc)},
            level=logging.ERROR,
            message=f"Error opening output file: {args.table_out}",
        )
        return 1
    if run_logger.persist:
        run_logger.save_dataframe('table.csv', frame)
    summary = table.summary()
    summary['outfile'] = args.table_out
    run_logger.log_event(
        'table.complete',
        summary,
        message=f"Table: {len(frame)} redshifts written to {args.table_out}",
    )
    return 0


def main(argv: Optional[Sequence[str]] = None, stdin: Optional[TextIO] = None,
         stdout: Optional[TextIO] = None, stderr: Optional[TextIO] = None) -> int:
    stdin = stdin if stdin is not None else sys.stdin
    stdout = stdout if stdout is not None else sys.stdout
    stderr = stderr if stderr is not None else sys.stderr
    argv = translate_legacy_args(sys.argv[1:] if argv is None else argv)

    base_parser, parser = _build_parsers()
    preliminary_args, remaining = base_parser.parse_known_args(argv)

    try:
        config_data = _load_configuration(preliminary_args.config)
    except ConfigValidationError as exc:
        stderr.write(f"Configuration error: {exc}\n")
        return 1

    cosmology_defaults = config_data['cosmology']
    run_defaults = config_data['run']
    parser.set_defaults(
        h0=cosmology_defaults.get('H0', CLI_DEFAULT_H0),
        omega_m=cosmology_defaults.get('omega_matter', CLI_DEFAULT_OMEGA_MATTER),
        omega_l=cosmology_defaults.get('omega_lambda', CLI_DEFAULT_OMEGA_LAMBDA),
        quiet=run_defaults.get('quiet', False),
        prompt=run_defaults.get('prompt', True),
        html=run_defaults.get('html', False),
        outfile=run_defaults.get('outfile', 'cosmic.out'),
        table_out=run_defaults.get('table_out', 'results.csv'),
        save_events=run_defaults.get('save_events', False),
    )
    parser.set_defaults(config=preliminary_args.config)
    args = parser.parse_args(remaining)

    run_logger = StructuredLogger(
        run_id=run_defaults.get('run_id'),
        base_dir=Path(run_defaults.get('log_dir', Path('results') / 'runs')),
        console_level=logging.INFO if args.verbose else logging.WARNING,
        persist=bool(args.save_events),
        stream=stderr,
    )
    mode = 'table' if args.table else 'batch' if args.batch else (
        'quick' if args.redshift is not None else 'interactive')
    run_logger.log_event(
        'run_start',
        {
            'config_path': args.config,
            'mode': mode,
            'html': bool(args.html),
            'constants_version': COSMO_CONSTANTS_VERSION,
        },
        message=f"=== cosmic {VERSION} ({mode} mode) ===",
    )
    if args.save_events:
        run_logger.save_json('metadata.json', {
            'run_id': run_logger.run_id,
            'arguments': vars(args),
            'environment': collect_environment_metadata(),
        })

    if not args.quiet:
        stdout.write(BANNER + "\n")

    if args.table:
        return _run_table(args, run_logger)

    try:
        validate_cosmology(args.h0, args.omega_m, args.omega_l)
        if args.redshift is not None:
            validate_redshift(args.redshift)
    except ConfigValidationError as exc:
        run_logger.log_event(
            'arguments.invalid',
            {'error': str(exc)},
            level=logging.ERROR,
            message=str(exc),
        )
        return 1

    cosmo = Cosmology(args.h0, args.omega_m, args.omega_l)
    if args.prompt:
        get_cosmology_from_user(cosmo, stdin, stdout, stderr)
    run_logger.log_event(
        'cosmology_configured',
        cosmo.parameters.as_dict(),
        message=f"Age of the Universe: {cosmo.age_gyr:.4f} Gyr",
    )

    if args.redshift is not None:
        cosmo.set_redshift(args.redshift)
        stdout.write(_render(cosmo, args.html))
        run_logger.log_state('quick.complete', cosmo)
        return 0

    if args.batch:
        return _run_batch(args, cosmo, run_logger, stdout)

    reported = run_interactive(cosmo, args.html, stdin, stdout, stderr)
    run_logger.log_event('interactive.complete', {'reports': reported})
    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
