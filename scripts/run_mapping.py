"""
Beacon mapping workflow

Loads scanner reports, merges them into one beacon map and reports the
number of distinct beacons and the largest distance between scanners.
"""

import sys
import argparse
import logging
from pathlib import Path

# Add the src to the path to import modules
sys.path.append(str(Path(__file__).parent.parent / "src"))

from beacon_mapping.preprocessing.loader import ScannerReportLoader, MalformedInputError
from beacon_mapping.alignment.overlap_detection import OverlapDetector, AmbiguousOverlapError
from beacon_mapping.alignment.scanner_merge import MergeOrchestrator, UnresolvedScannersError
from beacon_mapping.acceleration import PairParallelExecutor
from beacon_mapping.analysis import farthest_scanner_pair
from beacon_mapping.utils.config import load_config, AppConfig
from beacon_mapping.utils.export import export_beacons_to_csv, export_scanner_transforms_to_json
from beacon_mapping.utils.logging import setup_logger, set_package_log_level


def main(argv=None) -> int:
    """
    Main function to run the beacon mapping workflow.
    """
    parser = argparse.ArgumentParser(description="Beacon Mapping Workflow")
    parser.add_argument("--input", type=str, default=None, help="Scanner report text file (overrides paths.input_file)")
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to YAML configuration file (defaults to config/default.yaml)",
    )
    parser.add_argument("--output-dir", type=str, default=None, help="Directory for exported results")
    parser.add_argument("--threshold", type=int, default=None, help="Override alignment.overlap_threshold")
    parser.add_argument(
        "--workers",
        type=int,
        default=None,
        help="Test pairs in this many worker processes (enables parallel mode)",
    )
    parser.add_argument("--visualize", action="store_true", help="Open an interactive Plotly view of the map")
    args = parser.parse_args(argv)

    cfg: AppConfig = load_config(args.config)
    if args.input:
        cfg.paths.input_file = args.input
    if args.output_dir:
        cfg.paths.output_dir = args.output_dir
    if args.threshold is not None:
        cfg.alignment.overlap_threshold = args.threshold
    if args.workers is not None:
        cfg.parallel.enabled = True
        cfg.parallel.n_workers = args.workers

    log_level = getattr(logging, cfg.logging.level.upper(), logging.INFO)
    logger = setup_logger(__name__, level=log_level, log_file=cfg.logging.file)
    set_package_log_level(log_level)

    if not cfg.paths.input_file:
        logger.error("No input file given; set paths.input_file or pass --input.")
        return 2

    logger.info("Beacon Mapping Workflow")
    logger.info("=======================")

    try:
        reports = ScannerReportLoader().load(cfg.paths.input_file)
    except (FileNotFoundError, MalformedInputError) as e:
        logger.error(f"Failed to load scanner reports: {e}")
        return 1

    executor = None
    if cfg.parallel.enabled:
        executor = PairParallelExecutor(n_workers=cfg.parallel.n_workers, batch_size=cfg.parallel.batch_size)

    orchestrator = MergeOrchestrator(
        OverlapDetector(
            threshold=cfg.alignment.overlap_threshold,
            require_unique=cfg.alignment.require_unique,
        ),
        executor=executor,
    )

    try:
        result = orchestrator.merge(reports)
    except (UnresolvedScannersError, AmbiguousOverlapError, ValueError) as e:
        logger.error(f"Merge failed: {e}")
        return 1

    logger.info(f"Distinct beacons: {len(result.beacons)}")
    for scanner, position in result.scanner_positions.items():
        logger.info(f"  Scanner {scanner}: {position}")
    if len(result.scanner_positions) > 1:
        a, b, distance = farthest_scanner_pair(result.scanner_positions)
        logger.info(f"Largest scanner distance: {distance} (scanners {a} and {b})")

    if cfg.export.enabled:
        out_dir = Path(cfg.paths.output_dir)
        export_beacons_to_csv(result.beacons, out_dir / cfg.export.beacons_file)
        export_scanner_transforms_to_json(result, out_dir / cfg.export.scanners_file)

    if args.visualize or cfg.visualization.enabled:
        from beacon_mapping.visualization import BeaconMapVisualizer
        BeaconMapVisualizer(marker_size=cfg.visualization.marker_size).show(result)

    return 0


if __name__ == "__main__":
    sys.exit(main())
