from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

import cwl_utils.parser
import cwl_utils.parser.utils

from cwl2argo.argo.location import load_locations
from cwl2argo.argo.manifest import Workflow, dump_manifest
from cwl2argo.argo.translator import ArgoTranslator
from cwl2argo.config.validator import LocationValidator
from cwl2argo.core.exception import ValidationException
from cwl2argo.cwl.inputs import resolve_input_values
from cwl2argo.cwl.loader import load_tool
from cwl2argo.log_handler import CustomFormatter, HighlitingFilter, logger
from cwl2argo.parser import parser
from cwl2argo.version import VERSION


def _translate(args: argparse.Namespace) -> Workflow | None:
    if args.tool is None or args.inputs is None:
        raise ValidationException("Both TOOL and INPUTS must be provided")
    if logger.isEnabledFor(logging.INFO):
        logger.info(f"LOADING tool {args.tool}")
    cwl_definition = cwl_utils.parser.load_document_by_uri(args.tool)
    tool = load_tool(cwl_definition)
    cwl_inputs = cwl_utils.parser.utils.load_inputfile_by_uri(
        version=cwl_definition.cwlVersion,
        path=args.inputs,
        loadingOptions=cwl_definition.loadingOptions,
    )
    inputs = resolve_input_values(cwl_inputs)
    if logger.isEnabledFor(logging.INFO):
        logger.info("VALIDATING file locations")
    locations = load_locations(
        LocationValidator().validate_file(args.locations)
        if args.locations is not None
        else {}
    )
    if args.validate:
        if logger.isEnabledFor(logging.INFO):
            logger.info(f"COMPLETED validation of tool {tool.id}")
        return None
    return ArgoTranslator(
        tool=tool,
        inputs=inputs,
        locations=locations,
        volume_name=args.volume_name,
        mount_path=args.mount_path,
    ).translate()


def main(args: Sequence[str]) -> int:
    try:
        parsed_args = parser.parse_args(args)
        if parsed_args.version:
            print(f"cwl2argo version {VERSION}")
            return 0
        if parsed_args.quiet:
            logger.setLevel(logging.WARNING)
        elif parsed_args.debug:
            logger.setLevel(logging.DEBUG)
        if parsed_args.color and hasattr(sys.stderr, "isatty") and sys.stderr.isatty():
            colored_stream_handler = logging.StreamHandler()
            colored_stream_handler.setFormatter(CustomFormatter())
            logger.handlers = []
            logger.addHandler(colored_stream_handler)
            logger.addFilter(HighlitingFilter())
        if (workflow := _translate(parsed_args)) is not None:
            if parsed_args.output is not None:
                with open(parsed_args.output, "w") as f:
                    dump_manifest(workflow, f)
            else:
                dump_manifest(workflow, sys.stdout)
        return 0
    except SystemExit as se:
        if se.code != 0:
            logger.exception(se)
        return int(se.code) if se.code is not None else 1
    except Exception as e:
        logger.exception(e)
        if logger.isEnabledFor(logging.ERROR):
            logger.error("FAILED transpilation")
        return 1


def run() -> int:
    return main(sys.argv[1:])


if __name__ == "__main__":
    main(sys.argv[1:])
