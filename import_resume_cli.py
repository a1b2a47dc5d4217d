"""import_resume_cli.py
Run Magic Import on a resume file from the command line.
Example: `python import_resume_cli.py path/to/resume.pdf`
"""
import json
import sys
from typing import List, Optional

from resume_builder.exceptions import FileParserError
from resume_builder.file_parser.extract_text import extract_text_from_file
from resume_builder.importer.text_importer import import_text


def main(argv: Optional[List[str]] = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    if len(args) < 1:
        print("Usage: python import_resume_cli.py <file_path>", file=sys.stderr)
        return 1

    file_path = args[0]
    try:
        text = extract_text_from_file(file_path)
    except (FileParserError, FileNotFoundError) as e:
        print(f"Could not read '{file_path}': {e}", file=sys.stderr)
        return 1

    partial = import_text(text)
    print(json.dumps(partial, indent=2, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
