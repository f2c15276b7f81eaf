import argparse

parser = argparse.ArgumentParser(
    description="Translate a CWL CommandLineTool into an Argo Workflow manifest"
)
parser.add_argument(
    "tool",
    metavar="TOOL",
    nargs="?",
    type=str,
    help="The CWL CommandLineTool description to translate",
)
parser.add_argument(
    "inputs",
    metavar="INPUTS",
    nargs="?",
    type=str,
    help="The input job document with the runtime values of the tool inputs",
)
parser.add_argument(
    "--locations",
    "-l",
    type=str,
    help="Path to the file mapping File inputs and outputs to storage locations",
)
parser.add_argument(
    "--output",
    "-o",
    type=str,
    help="Write the manifest to this file instead of the standard output",
)
parser.add_argument(
    "--volume-name",
    default="argovolume",
    type=str,
    help="Name of the persistent volume claim created for File outputs",
)
parser.add_argument(
    "--mount-path",
    default="/mnt/pvol",
    type=str,
    help="Mount path of the volume when the container has no working directory",
)
parser.add_argument(
    "--color",
    action="store_true",
    help="Prints log preamble with colors related to the logging level",
)
parser.add_argument(
    "--debug", action="store_true", help="Prints debug-level diagnostic output"
)
parser.add_argument(
    "--quiet", action="store_true", help="Only prints warnings and errors"
)
parser.add_argument(
    "--validate",
    action="store_true",
    help="Validate the tool, the inputs and the locations without translating",
)
parser.add_argument(
    "--version",
    action="store_true",
    help="Report the name and version, then quit without further processing",
)
