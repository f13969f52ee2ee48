import argparse
import logging
import time

from rollstats.adapters.readers import build_reader
from rollstats.core.config import Config
from rollstats.core.domain.pipeline.ingestor import Ingestor
from rollstats.core.domain.rolling_stats import RollingStats


def main():
    parser = argparse.ArgumentParser(description="Rolling statistics over a raw record stream")
    parser.add_argument("config", nargs="?", default="./configs/config.yaml")
    args = parser.parse_args()

    cfg = Config(args.config)
    logging.basicConfig(
        level=cfg.log_level,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    window = cfg.window_params()
    source = cfg.source_params()
    stats = RollingStats.from_params(window)
    ingestor = Ingestor(build_reader(source), stats, chunk_size=source.chunk_size)

    logging.info(
        "Window of %d %s records (%s reconstructor)",
        window.capacity,
        window.encoding.to_str(),
        window.strategy.to_str(),
    )

    ingestor.start()
    try:
        while ingestor.running:
            time.sleep(cfg.report_interval_s)
            report(ingestor)
    except KeyboardInterrupt:
        ingestor.stop()
    ingestor.join(timeout=1.0)
    report(ingestor)


def report(ingestor: Ingestor):
    snap = ingestor.snapshot()
    if snap is None:
        logging.info("Window empty (%d bytes read)", ingestor.bytes_read)
        return
    logging.info(
        "n=%d mean=%.6g std=%.6g min=%.6g max=%.6g malformed=%d",
        snap.count,
        snap.mean,
        snap.std_dev,
        snap.min,
        snap.max,
        ingestor.errors,
    )


if __name__ == "__main__":
    main()
