#!/usr/bin/env python3
import atheris
import sys

with atheris.instrument_imports():
    import json

    from devsig.inference import (
        REFERENCE_SIGNATURES,
        CatalogError,
        DeviceCatalog,
        ObservedCharacteristics,
        classify,
    )

_CATALOG = DeviceCatalog(REFERENCE_SIGNATURES)


def TestOneInput(data):
    """Fuzz characteristics parsing and classification; neither may raise."""
    fdp = atheris.FuzzedDataProvider(data)

    # Fuzz observed characteristics from arbitrary JSON objects
    try:
        raw = json.loads(fdp.ConsumeUnicodeNoSurrogates(fdp.ConsumeIntInRange(0, 2048)))
    except (json.JSONDecodeError, ValueError, RecursionError):
        raw = {}
    observed = ObservedCharacteristics.from_mapping(raw if isinstance(raw, dict) else {})
    result = classify(observed, _CATALOG)
    assert 0 <= result.confidence <= 100
    assert result.top_matches[0].score == max(m.score for m in result.top_matches)

    # Fuzz catalog loading from arbitrary records
    try:
        records = json.loads(fdp.ConsumeUnicodeNoSurrogates(fdp.ConsumeIntInRange(0, 2048)))
        if isinstance(records, list):
            DeviceCatalog.from_records(records)
    except (json.JSONDecodeError, ValueError, RecursionError, CatalogError):
        pass

def main():
    atheris.Setup(sys.argv, TestOneInput)
    atheris.Fuzz()

if __name__ == "__main__":
    main()
