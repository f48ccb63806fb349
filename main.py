#!/usr/bin/env python3

import argparse
import json
import logging
import sys
from typing import List, Optional
from pathlib import Path

from contacts_resolver.core.contact import Contact
from contacts_resolver.core.diff import contact_differences, describe_contact, group_by_name
from contacts_resolver.core.importer import ContactImporter, ImportReport
from contacts_resolver.core.matcher import ContactMatcher
from contacts_resolver.core.types import ValidationLevel
from contacts_resolver.io.csv import CSVHandler
from contacts_resolver.io.properties import build_operations
from contacts_resolver.io.vcard import VCardHandler
from contacts_resolver.settings import DEFAULT_OUTPUT_DIR, LOG_LEVEL


def load_contacts(input_paths: List[Path]) -> List[Contact]:
    """Load contacts from input files"""
    contacts = []
    csv_handler = CSVHandler()
    vcard_handler = VCardHandler()

    logging.info(f"Loading contacts from {len(input_paths)} files")
    for path in input_paths:
        try:
            logging.debug(f"Processing file: {path}")
            if path.suffix.lower() == ".csv":
                new_contacts = csv_handler.read_csv(str(path))
                logging.debug(f"Loaded {len(new_contacts)} contacts from CSV: {path}")
                contacts.extend(new_contacts)
            elif path.suffix.lower() in [".vcf", ".vcard"]:
                new_contacts = vcard_handler.read_vcard(str(path))
                logging.debug(f"Loaded {len(new_contacts)} contacts from VCard: {path}")
                contacts.extend(new_contacts)
            else:
                logging.warning(f"Unsupported file format: {path}")
        except Exception as e:
            logging.error(f"Error loading file {path}: {e}")
            raise

    logging.info(f"Successfully loaded {len(contacts)} contacts in total")
    return contacts


def save_results(contacts: List[Contact], output_dir: Path) -> None:
    """Save deduplicated contacts"""
    logging.info(f"Saving {len(contacts)} contacts to {output_dir}")
    output_dir.mkdir(parents=True, exist_ok=True)

    csv_path = output_dir / "contacts.csv"
    CSVHandler().write_csv(contacts, str(csv_path))
    logging.debug(f"Saved contacts to CSV: {csv_path}")

    vcf_path = output_dir / "contacts.vcf"
    VCardHandler().write_vcard(contacts, str(vcf_path))
    logging.debug(f"Saved contacts to VCard: {vcf_path}")


def save_plan(report: ImportReport, plan_path: Path) -> None:
    """Write the object store operations for this import as JSON"""
    operations = build_operations(report)
    plan_path.parent.mkdir(parents=True, exist_ok=True)
    with open(plan_path, "w", encoding="utf-8") as f:
        json.dump(operations, f, indent=2, ensure_ascii=False)
    logging.info(f"Wrote {len(operations)} store operations to {plan_path}")


def print_report(report: ImportReport, dry_run: bool) -> None:
    if dry_run:
        print("Dry run - nothing written")
    for contact in report.created:
        print(f"✓ New: {contact.display_name}")
    for contact in report.merged:
        print(f"✓ Updated: {contact.display_name}")
    print(f"\n{report.summary()}")
    print(f"{len(report.entities)} distinct contacts")


def run_import(args) -> int:
    contacts = load_contacts([Path(p) for p in args.inputs])
    if not contacts:
        logging.error("No contacts found in provided files")
        return 1

    existing = load_contacts([Path(p) for p in args.existing]) if args.existing else []

    validation_levels = {
        "none": ValidationLevel.NONE,
        "basic": ValidationLevel.BASIC,
        "strict": ValidationLevel.STRICT,
    }
    importer = ContactImporter(
        existing=existing,
        merge=not args.no_merge,
        validation_level=validation_levels[args.validation],
    )
    report = importer.import_contacts(contacts)

    if not args.dry_run:
        save_results(report.entities, Path(args.output_dir))
        if args.plan:
            save_plan(report, Path(args.plan))

    print_report(report, args.dry_run)
    return 0


def run_diff(args) -> int:
    contacts = load_contacts([Path(p) for p in args.inputs])
    if not contacts:
        logging.error("No contacts found in provided files")
        return 1

    groups = group_by_name(contacts, args.name or "")
    if not groups:
        print("No duplicate contacts found")
        return 0

    matcher = ContactMatcher()
    for members in groups.values():
        print(f"=== {members[0].display_name} ({len(members)} contacts) ===")
        for i, contact in enumerate(members, start=1):
            print(f"\n[{i}] ID: {contact.object_id or '-'}")
            for line in describe_contact(contact):
                print(f"  {line}")

        print("\n--- Differences ---")
        base = members[0]
        for i, other in enumerate(members[1:], start=2):
            strength = matcher.compare(base, other)
            print(f"\n[1] vs [{i}] (match: {strength.name.lower()}):")
            for line in contact_differences(base, other):
                print(f"  {line}")
        print()

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Deduplicate and merge contacts from vCard and CSV files."
    )
    parser.add_argument(
        "--verbose", "-v",
        action="store_true",
        help="Enable verbose logging"
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    import_parser = subparsers.add_parser(
        "import", help="Import contacts, merging duplicates into known contacts"
    )
    import_parser.add_argument(
        "inputs", nargs="+", help="Input file paths (.vcf, .vcard or .csv)"
    )
    import_parser.add_argument(
        "--existing", "-e",
        nargs="*",
        default=[],
        help="Files holding the already known contacts",
    )
    import_parser.add_argument(
        "--no-merge",
        action="store_true",
        help="Skip duplicates instead of merging them into the known contact",
    )
    import_parser.add_argument(
        "--dry-run", action="store_true", help="Report what would happen without writing files"
    )
    import_parser.add_argument(
        "--output-dir", "-o",
        default=DEFAULT_OUTPUT_DIR,
        help="Output directory for processed files",
    )
    import_parser.add_argument(
        "--plan", help="Write the object store create/update operations to this JSON file"
    )
    import_parser.add_argument(
        "--validation",
        choices=["none", "basic", "strict"],
        default="basic",
        help="Field validation (strict: contacts with invalid emails or unusable phones are not imported)",
    )
    import_parser.set_defaults(func=run_import)

    diff_parser = subparsers.add_parser(
        "diff", help="Find and diff contacts with the same display name"
    )
    diff_parser.add_argument("inputs", nargs="+", help="Input file paths (.vcf, .vcard or .csv)")
    diff_parser.add_argument(
        "--name", "-n", help="Filter by contact name (normalized substring match)"
    )
    diff_parser.set_defaults(func=run_diff)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else LOG_LEVEL,
        format="%(asctime)s - %(levelname)s - %(message)s"
    )

    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
