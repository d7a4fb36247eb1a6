"""
convert_iching.py - Flattens the I-Ching dataset into line arrays.
Reads iching.json, maps every hexagram's line pattern to unbroken/broken
flags, and writes iching-simple.json for the Elm frontend.
"""

import json
import logging
import os
import sys

logger = logging.getLogger(__name__)

ROOT = os.path.dirname(os.path.abspath(__file__))
INPUT_PATH = os.path.join(ROOT, "iching.json")
OUTPUT_PATH = os.path.join(ROOT, "iching-simple.json")

# Line code for an old yang line; everything else counts as broken
UNBROKEN = "9"

# False -> emit 1/0 instead of true/false
USE_BOOLEANS = True


def convert_pattern(record, use_booleans=USE_BOOLEANS):
    """
    Convert one hexagram record to a list of line flags.

    Args:
        record: mapping with a 'pattern' string such as "966797"
        use_booleans: emit True/False when set, 1/0 otherwise
    """
    lines = []
    for letter in record['pattern']:
        unbroken = letter == UNBROKEN
        if use_booleans:
            lines.append(unbroken)
        else:
            lines.append(1 if unbroken else 0)
    return lines


def convert_all(records, use_booleans=USE_BOOLEANS):
    """Convert every record, keeping input order."""
    converted = [convert_pattern(r, use_booleans) for r in records]

    lengths = {len(lines) for lines in converted}
    if len(lengths) > 1:
        raise ValueError(
            'Hexagram patterns must all have the same length. '
            'Found: ' + ', '.join(str(n) for n in sorted(lengths))
        )
    return converted


def load_hexagrams(path):
    with open(path, encoding='utf-8') as f:
        data = json.load(f)

    try:
        return data['hexagrams']['hexagram']
    except (KeyError, TypeError):
        raise ValueError(
            'Could not find hexagrams.hexagram in ' + str(path)
        ) from None


def write_converted(converted, path):
    # Same layout as JSON.stringify(value, null, 2): no trailing newline
    with open(path, 'w', encoding='utf-8') as f:
        f.write(json.dumps(converted, indent=2))


def convert_file(input_path, output_path, use_booleans=USE_BOOLEANS):
    """
    Load, convert and write the dataset in one go.

    Any read or parse failure propagates; there is nothing to recover for a
    one-shot run. Returns the converted list.
    """
    converted = convert_all(load_hexagrams(input_path), use_booleans)
    write_converted(converted, output_path)
    return converted


def main():
    logging.basicConfig(level=logging.INFO, format='%(message)s', stream=sys.stdout)
    converted = convert_file(INPUT_PATH, OUTPUT_PATH, USE_BOOLEANS)
    logger.info("Wrote %d hexagrams to %s", len(converted), OUTPUT_PATH)


if __name__ == "__main__":
    main()
