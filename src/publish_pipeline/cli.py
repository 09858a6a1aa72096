from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from publish_pipeline.output.copy import copy_output
from publish_pipeline.pipeline.publish import PublishPaths, run_manifest_stage, run_publish
from publish_pipeline.settings import load_settings
from publish_pipeline.versioning.update_log import read_update_log


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="publish", description="Incremental bundle publish")
    p.add_argument("--config", default="configs/publish.yaml", help="Path to publish YAML")
    sub = p.add_subparsers(dest="cmd", required=True)
    sub.add_parser("manifest", help="Rebuild the manifest document only")
    sub.add_parser("build", help="manifest -> pack -> diff -> versions/updates -> reclaim")
    p_copy = sub.add_parser("copy", help="Copy the platform output folder to another location")
    p_copy.add_argument("--dest", required=True, help="Destination folder")
    sub.add_parser("history", help="Print the update log")
    return p


def _run(args: argparse.Namespace) -> Dict[str, Any]:
    cfg = load_settings(Path(args.config))

    if args.cmd == "manifest":
        manifest = run_manifest_stage(cfg)
        if manifest is None:
            return {"status": "noop"}
        return {"status": "ok", "bundles": manifest.bundle_names(), "items": len(manifest.items)}

    if args.cmd == "build":
        return run_publish(cfg)

    paths = PublishPaths.from_settings(cfg)

    if args.cmd == "copy":
        target = copy_output(paths.output_root, paths.platform, Path(args.dest))
        return {"status": "ok" if target else "noop", "target": str(target) if target else None}

    # history
    batches = read_update_log(paths.updates_path)
    return {"status": "ok", "batches": [{"timestamp": b.timestamp, "names": b.names} for b in batches]}


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    try:
        res = _run(args)
        print(json.dumps(res, ensure_ascii=False, indent=2))
        sys.exit(0)
    except Exception as e:
        print(f"[ERROR] {type(e).__name__}: {e}", file=sys.stderr)
        sys.exit(2)


if __name__ == "__main__":
    main()
