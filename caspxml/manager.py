import os
import logging
from dataclasses import dataclass, field
from typing import Optional, Tuple

from .constants import PACKAGE_EXTENSION
from .storage import StorageManager
from .package_reader import read_package, iter_cas_parts
from .decoder import decode_record_name
from .classifier import classify_record, strip_creator
from .grouping import is_grouping_mode, group_hair_parts
from .tuning import render_parts, render_hair_groups
from .errors import PackageError, UnresolvedPartsError

logger = logging.getLogger("CaspXml")


@dataclass(frozen=True)
class RunResult:
    document: Optional[object] = None
    output_path: Optional[str] = None
    parts: Tuple = field(default_factory=tuple)
    groups: Tuple = field(default_factory=tuple)


class TuningManager:
    def __init__(self, config, storage=None):
        self.config = config
        self.storage = storage or StorageManager(config.input_dir, config.output_dir)

    def resolve_base_name(self, files):
        if self.config.base_name:
            logger.info(f'Using provided snippet base name: "{self.config.base_name}"')
            return self.config.base_name
        first = files[0]
        if first.lower().endswith(PACKAGE_EXTENSION):
            first = first[:-len(PACKAGE_EXTENSION)]
        base_name = strip_creator(first, self.config.creator)
        logger.info(f'Using dynamically generated snippet base name: "{base_name}"')
        return base_name

    def collect_cas_parts(self, files):
        """(filename, record) for every CASP in the given packages, unreadable files skipped"""
        found = []
        for filename in files:
            logger.info(f"--- Processing: {filename} ---")
            try:
                records = read_package(self.storage.package_path(filename))
            except (PackageError, OSError) as e:
                logger.error(f"Could not process file {filename}. Is it a valid .package file? {e}")
                continue

            casps = list(iter_cas_parts(records))
            if not casps:
                logger.info("No CAS Parts found in this file.")
                continue

            logger.info(f"Found {len(casps)} CAS Part(s) in this file.")
            for record in casps:
                logger.debug(f"  > Extracted Instance ID: {record.instance}")
                found.append((filename, record))
        return found

    def build_parts(self, found):
        parts = {}
        unresolved = []
        for filename, record in found:
            part = classify_record(
                record.instance,
                filename,
                self.config.creator,
                part_type_override=self.config.part_type,
                subtype_override=self.config.subtype,
            )
            if not part.resolved and filename not in unresolved:
                unresolved.append(filename)
            previous = parts.get(record.instance)
            if previous is not None and previous.source_file != filename:
                logger.warning(
                    f"Instance {record.instance} appears in '{previous.source_file}' and '{filename}', keeping the latter"
                )
            parts[record.instance] = part

        if unresolved:
            logger.error("Could not determine the part type for these files:")
            for filename in unresolved:
                logger.error(f"  - {filename}")
            logger.error("Rename them (erect/soft/semi/top/bottom/pubic) or pass --type. No file was written.")
            raise UnresolvedPartsError(unresolved)

        return tuple(parts.values())

    def build_hair_groups(self, found):
        entries = []
        for filename, record in found:
            result = decode_record_name(record)
            if result.ok:
                logger.debug(f"  > {record.instance} - {result.name}")
            entries.append((filename, record.instance, result.name))

        grouped = group_hair_parts(
            entries, self.config.creator, self.config.part_type, self.storage.input_dir
        )
        if grouped.dropped_groups:
            logger.error(f"{len(grouped.dropped_groups)} incomplete group(s) left out of the tuning")
        return grouped.groups

    def run(self):
        cfg = self.config
        logger.info(f"Configuration: Creator='{cfg.creator}', Icon='{cfg.icon}'")
        if cfg.subtype:
            logger.info(f"Subtype Override: '{cfg.subtype}'")
        if cfg.part_type:
            logger.info(f"Part Type Override: '{cfg.part_type}'")
        logger.info(f"Input Directory: '{self.storage.input_dir}'")
        logger.info(f"Output Directory: '{self.storage.output_dir}'")

        self.storage.ensure_directories()
        files = self.storage.list_packages()
        if not files:
            logger.info(f"No .package files found in '{self.storage.input_dir}'. Please add some and run again.")
            return RunResult()

        logger.info(f"Found {len(files)} package file(s) to process.")
        base_name = self.resolve_base_name(files)

        found = self.collect_cas_parts(files)
        if not found:
            logger.info("No CAS Parts were found in any of the files. Exiting.")
            return RunResult()

        if is_grouping_mode(self.storage.input_dir, files):
            logger.info("Pubic hair files detected, grouping by style, color and length.")
            groups = self.build_hair_groups(found)
            if not groups:
                logger.error("No complete pubic hair group (short, medium and long) was found. Nothing written.")
                return RunResult()
            document = render_hair_groups(groups, cfg.creator, cfg.icon, base_name)
            parts = ()
        else:
            parts = self.build_parts(found)
            logger.info(f"Total unique CAS Part instances found: {len(parts)}")
            document = render_parts(parts, cfg.creator, cfg.icon, base_name)
            groups = ()

        path = self.storage.write_document(document)
        logger.info(f"Success! Snippet tuning file created at: {os.path.abspath(path)}")
        return RunResult(document=document, output_path=path, parts=parts, groups=groups)
