import argparse
import logging

from rollstats.adapters.writers import FileWriter, UDPSocketWriter
from rollstats.core.domain.encoding import parse_encoding
from rollstats.core.domain.params.source_params import SourceParams
from rollstats.core.ports.writer import WriterPort
from rollstats.utils.synthetic import synthetic_records


logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(message)s",
)


def build_writer(args) -> WriterPort:
    if args.udp:
        # same ip:port validation as the source config
        params = SourceParams.from_dict({"ip": args.udp})
        return UDPSocketWriter(params.ip, params.port)
    if not args.filename:
        raise ValueError("Either a filename or --udp host:port is required")
    return FileWriter(args.filename)


def main():
    parser = argparse.ArgumentParser(description="Write synthetic records to a file or a UDP target")
    parser.add_argument("filename", nargs="?")
    parser.add_argument("--udp", default=None, help="send to ip:port instead of writing a file")
    parser.add_argument("--encoding", default="f32_le")
    parser.add_argument("--count", type=int, default=100_000)
    parser.add_argument("--mean", type=float, default=0.0)
    parser.add_argument("--std", type=float, default=1.0)
    parser.add_argument("--seed", type=int, default=None)
    args = parser.parse_args()

    encoding = parse_encoding(args.encoding)
    data = synthetic_records(encoding, args.count, args.mean, args.std, args.seed)

    writer = build_writer(args)
    try:
        written = writer.write(data)
    finally:
        writer.close()

    logging.info(
        "Wrote %d %s records (%d bytes) to %s",
        args.count, encoding.name, written, args.udp or args.filename,
    )


if __name__ == "__main__":
    main()
