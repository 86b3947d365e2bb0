from __future__ import annotations

import os
import sys
import argparse
import json as _json

from typing import List, Optional, Sequence

from rfarc.archive import ArchiveEntry, decode_archive, encode_archive
from rfarc.textsection import decode_text_section, encode_text_section
from rfarc.sniff import sniff_tag
from rfarc.diffutil import first_difference
from rfarc.pathutil import section_filename, numbered_sections
from rfarc.errors import (
    RfarcError,
    ArchiveError,
    TextSectionError,
    RoundTripMismatch,
    RoundTripLengthMismatch,
)


def _read_bytes(path: str) -> bytes:
    with open(path, "rb") as fh:
        return fh.read()


def _write_bytes(path: str, data: bytes) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "wb") as fh:
        fh.write(data)


def _check_destination(path: str, overwrite: bool, what: str) -> None:
    """Refuse to clobber an existing output unless overwrite was requested."""
    if not overwrite and os.path.exists(path):
        raise FileExistsError(f"Destination {what} already exists: {path}")


def _read_archive(path: str) -> List[ArchiveEntry]:
    return decode_archive(_read_bytes(path))


def _section_at(entries: Sequence[ArchiveEntry], section_id: int) -> ArchiveEntry:
    if section_id < 0 or section_id >= len(entries):
        raise ValueError(f"Section id {section_id} out of range (0..{len(entries) - 1})")
    return entries[section_id]


def _replace_at(entries: Sequence[ArchiveEntry], section_id: int, payload: bytes) -> List[ArchiveEntry]:
    _section_at(entries, section_id)
    out = list(entries)
    out[section_id] = ArchiveEntry(tag=sniff_tag(payload), payload=payload)
    return out


def _dump_json(path: str, strings: Sequence[str]) -> None:
    os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
    with open(path, "w", encoding="utf-8") as fh:
        _json.dump(list(strings), fh, ensure_ascii=False, indent=2)
        fh.write("\n")


def _load_json(path: str) -> List[str]:
    with open(path, "r", encoding="utf-8") as fh:
        doc = _json.load(fh)
    if not isinstance(doc, list) or not all(isinstance(s, str) for s in doc):
        raise ValueError(f"{path}: expected a JSON list of strings")
    return doc


def _report_unmapped(unmapped, quiet: bool) -> None:
    if quiet or not unmapped:
        return
    chars = "".join(sorted(unmapped))
    print(f"Note: {len(unmapped)} unmapped character(s): {chars}", file=sys.stderr)


def cmd_test(
    archive: str,
    *,
    section_ids: Optional[Sequence[int]] = None,
    dump_dir: str = ".",
    quiet: bool = False,
) -> bool:
    """Round-trip an archive and check the result is byte-for-byte identical.

    Args:
        archive: Path to the .arc file.
        section_ids: Entries to additionally push through the TEXT codec.
        dump_dir: Where expected.bin/actual.bin are written on mismatch.
        quiet: Only print the final result.

    Raises:
        RoundTripMismatch / RoundTripLengthMismatch on any difference.
    """
    expected = _read_bytes(archive)
    entries = decode_archive(expected)
    for sid in section_ids or []:
        section = decode_text_section(_section_at(entries, sid).payload)
        if not quiet:
            print(f" section {sid}: {len(section.strings)} strings")
        _report_unmapped(section.unmapped, quiet)
        entries = _replace_at(entries, sid, encode_text_section(section.strings))
    actual = encode_archive(entries)

    diff = first_difference(expected, actual)
    if diff is not None:
        exp_path = os.path.join(dump_dir, "expected.bin")
        act_path = os.path.join(dump_dir, "actual.bin")
        _write_bytes(exp_path, expected)
        _write_bytes(act_path, actual)
        print(f"Wrote {exp_path} and {act_path} for diffing.", file=sys.stderr)
        if diff < min(len(expected), len(actual)):
            raise RoundTripMismatch(diff, expected[diff], actual[diff])
        raise RoundTripLengthMismatch(len(expected), len(actual))
    print(f"OK: {len(entries)} entries, {len(actual)} bytes")
    return True


def cmd_list(archive: str) -> bool:
    """Print index, tag and size of every entry."""
    entries = _read_archive(archive)
    for i, e in enumerate(entries):
        print(f"{i}\t{e.tag or '-'}\t{len(e.payload)}")
    return True


def cmd_extract(archive: str, outdir: str, *, quiet: bool = False) -> bool:
    """Dump every entry of an archive into a new directory as <index>.<tag>."""
    if os.path.exists(outdir):
        raise FileExistsError(f"Output directory already exists: {outdir}")
    entries = _read_archive(archive)
    os.makedirs(outdir)
    total = 0
    for i, e in enumerate(entries):
        name = section_filename(i, e.tag)
        _write_bytes(os.path.join(outdir, name), e.payload)
        total += len(e.payload)
        if not quiet:
            print(f" extracting: {i + 1:>4}/{len(entries):<4} {name}")
    print(f"Done: extracted {len(entries)} sections ({total} bytes) to {outdir}")
    return True


def cmd_archive(indir: str, output: str, *, overwrite: bool = False, quiet: bool = False) -> bool:
    """Pack all numerically named files of a directory into an archive, in index order."""
    _check_destination(output, overwrite, "archive")
    sections = numbered_sections(indir)
    entries: List[ArchiveEntry] = []
    prev = -1
    for pos, (idx, path) in enumerate(sections):
        if idx != prev + 1:
            gap = f"section {prev + 1}" if idx - 1 == prev + 1 else f"sections {prev + 1}..{idx - 1}"
            print(
                f"Warning: {gap} missing; {os.path.basename(path)} packed at index {pos}",
                file=sys.stderr,
            )
        prev = idx
        payload = _read_bytes(path)
        entries.append(ArchiveEntry(tag=sniff_tag(payload), payload=payload))
        if not quiet:
            print(f"   packing: {pos:>4} {os.path.basename(path)}")
    data = encode_archive(entries)
    _write_bytes(output, data)
    print(f"Done: packed {len(entries)} sections ({len(data)} bytes) into {output}")
    return True


def cmd_dump_section(archive: str, section_id: int, output: str, *, overwrite: bool = False) -> bool:
    """Write one entry's raw payload to a file."""
    _check_destination(output, overwrite, "section file")
    entry = _section_at(_read_archive(archive), section_id)
    _write_bytes(output, entry.payload)
    return True


def cmd_replace_section(
    archive: str,
    output: str,
    section_id: int,
    section_file: str,
    *,
    overwrite: bool = False,
) -> bool:
    """Substitute one entry's payload verbatim from a file and write a new archive."""
    _check_destination(output, overwrite, "archive file")
    entries = _replace_at(_read_archive(archive), section_id, _read_bytes(section_file))
    _write_bytes(output, encode_archive(entries))
    return True


def cmd_extract_text_file(section_file: str, output: str, *, overwrite: bool = False, quiet: bool = False) -> bool:
    """Export a standalone TEXT section file as a JSON list of strings."""
    _check_destination(output, overwrite, "JSON file")
    section = decode_text_section(_read_bytes(section_file))
    _dump_json(output, section.strings)
    _report_unmapped(section.unmapped, quiet)
    print(f"Done: {len(section.strings)} strings written to {output}")
    return True


def cmd_extract_text_section(
    archive: str,
    section_id: int,
    output: str,
    *,
    overwrite: bool = False,
    quiet: bool = False,
) -> bool:
    """Export entry ``section_id`` of an archive, read as a TEXT section, to JSON."""
    _check_destination(output, overwrite, "JSON file")
    entry = _section_at(_read_archive(archive), section_id)
    section = decode_text_section(entry.payload)
    _dump_json(output, section.strings)
    _report_unmapped(section.unmapped, quiet)
    print(f"Done: {len(section.strings)} strings written to {output}")
    return True


def cmd_replace_text_section(
    archive: str,
    output: str,
    section_id: int,
    text_file: str,
    *,
    overwrite: bool = False,
) -> bool:
    """Encode a JSON list of strings as a TEXT section and put it at ``section_id``."""
    _check_destination(output, overwrite, "archive file")
    strings = _load_json(text_file)
    entries = _replace_at(_read_archive(archive), section_id, encode_text_section(strings))
    _write_bytes(output, encode_archive(entries))
    print(f"Done: {len(strings)} strings imported into section {section_id} of {output}")
    return True


def main(argv: Optional[List[str]] = None):
    ap = argparse.ArgumentParser(prog="rfarc", description="Rune Factory 3 .arc archiver tool")
    sub = ap.add_subparsers(dest="cmd", required=True)

    ap_test = sub.add_parser("test", help="Round-trip an archive and check the output is byte-for-byte identical")
    ap_test.add_argument("--in-archive", required=True, help="The archive file to read")
    ap_test.add_argument(
        "--section-id",
        type=int,
        action="append",
        default=[],
        help="TEXT section to also round-trip through the text codec (repeatable, zero indexed)",
    )
    ap_test.add_argument("--dump-dir", default=".", help="Where expected.bin/actual.bin go on mismatch (default: .)")
    ap_test.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")

    ap_list = sub.add_parser("list", help="List sections of an archive")
    ap_list.add_argument("--in-archive", required=True, help="The archive file to read")

    ap_extract = sub.add_parser("extract", help="Dump all sections from an archive into a directory")
    ap_extract.add_argument("--in-archive", required=True, help="The archive file to read")
    ap_extract.add_argument(
        "--out-directory",
        required=True,
        help="Directory to dump sections to. It must not exist; it will be created.",
    )
    ap_extract.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")

    ap_archive = sub.add_parser("archive", help="Package all numbered files in a directory into an archive")
    ap_archive.add_argument(
        "--in-directory",
        required=True,
        help="Directory to archive files from. Every file whose name starts with a number is packed, in numeric order.",
    )
    ap_archive.add_argument("--out-archive", required=True, help="The archive file to write to")
    ap_archive.add_argument("--overwrite", action="store_true", help="Overwrite existing files")
    ap_archive.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")

    ap_dump = sub.add_parser("dump-section", help="Dump one section of an archive to a file")
    ap_dump.add_argument("--in-archive", required=True, help="The archive file to read")
    ap_dump.add_argument("--section-id", required=True, type=int, help="Section id (zero indexed)")
    ap_dump.add_argument("--out-section", required=True, help="Destination to write the section binary to")
    ap_dump.add_argument("--overwrite", action="store_true", help="Overwrite existing files")

    ap_replace = sub.add_parser("replace-section", help="Replace one section of an archive with a file's bytes")
    ap_replace.add_argument("--in-archive", required=True, help="The archive file to read")
    ap_replace.add_argument("--out-archive", required=True, help="The archive file to write to")
    ap_replace.add_argument("--section-id", required=True, type=int, help="Section id (zero indexed)")
    ap_replace.add_argument("--in-section", required=True, help="The section file to insert verbatim")
    ap_replace.add_argument("--overwrite", action="store_true", help="Overwrite existing files")

    ap_xtf = sub.add_parser("extract-text-file", help="Extract a TEXT section file into human readable JSON")
    ap_xtf.add_argument("--in-section", required=True, help="The TEXT section file to read")
    ap_xtf.add_argument("--out-text-section", required=True, help="Destination to write text section as JSON to")
    ap_xtf.add_argument("--overwrite", action="store_true", help="Overwrite existing files")
    ap_xtf.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")

    ap_xts = sub.add_parser("extract-text-section", help="Extract a TEXT section of an archive into JSON")
    ap_xts.add_argument("--in-archive", required=True, help="The archive file to read")
    ap_xts.add_argument("--section-id", required=True, type=int, help="Section id (zero indexed)")
    ap_xts.add_argument("--out-text-section", required=True, help="Destination to write text section as JSON to")
    ap_xts.add_argument("--overwrite", action="store_true", help="Overwrite existing files")
    ap_xts.add_argument("--quiet", help="limit outputs to summaries only", action="store_true")

    ap_rts = sub.add_parser("replace-text-section", help="Import a JSON string list as a TEXT section of an archive")
    ap_rts.add_argument("--in-archive", required=True, help="The archive file to read")
    ap_rts.add_argument("--out-archive", required=True, help="The archive file to write to")
    ap_rts.add_argument("--section-id", required=True, type=int, help="Section id (zero indexed)")
    ap_rts.add_argument("--in-text-section", required=True, help="The JSON file containing the text section to write")
    ap_rts.add_argument("--overwrite", action="store_true", help="Overwrite existing files")

    args = ap.parse_args(argv)
    try:
        if args.cmd == "test":
            cmd_test(args.in_archive, section_ids=args.section_id, dump_dir=args.dump_dir, quiet=args.quiet)
        elif args.cmd == "list":
            cmd_list(args.in_archive)
        elif args.cmd == "extract":
            cmd_extract(args.in_archive, args.out_directory, quiet=args.quiet)
        elif args.cmd == "archive":
            cmd_archive(args.in_directory, args.out_archive, overwrite=args.overwrite, quiet=args.quiet)
        elif args.cmd == "dump-section":
            cmd_dump_section(args.in_archive, args.section_id, args.out_section, overwrite=args.overwrite)
        elif args.cmd == "replace-section":
            cmd_replace_section(
                args.in_archive, args.out_archive, args.section_id, args.in_section, overwrite=args.overwrite
            )
        elif args.cmd == "extract-text-file":
            cmd_extract_text_file(args.in_section, args.out_text_section, overwrite=args.overwrite, quiet=args.quiet)
        elif args.cmd == "extract-text-section":
            cmd_extract_text_section(
                args.in_archive, args.section_id, args.out_text_section, overwrite=args.overwrite, quiet=args.quiet
            )
        elif args.cmd == "replace-text-section":
            cmd_replace_text_section(
                args.in_archive, args.out_archive, args.section_id, args.in_text_section, overwrite=args.overwrite
            )
        else:
            raise RuntimeError("Unknown command")
    except (RoundTripMismatch, RoundTripLengthMismatch) as e:
        print(f"FAIL: {e}", file=sys.stderr)
        sys.exit(1)
    except (RfarcError, OSError, ValueError, RuntimeError) as e:
        if isinstance(e, (ArchiveError, TextSectionError)):
            print(f"Error: {type(e).__name__}: {e}", file=sys.stderr)
        else:
            print(f"Error: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
