import pytest

from rollstats.core.config import Config, DEFAULT_REPORT_INTERVAL_S
from rollstats.core.domain.encoding import F32_LE, I32_BE
from rollstats.core.domain.errors import CapacityError
from rollstats.core.domain.params.source_params import SourceParams, DEFAULT_CHUNK_SIZE
from rollstats.core.domain.params.window_params import WindowParams, DEFAULT_CAPACITY
from rollstats.core.services.reconstructor import ReconstructorStrategy

CONFIG_YAML = """
window:
  capacity: 16
  encoding: i32_be
  strategy: copying
  recompute_every: 64
source:
  ip: 127.0.0.1:5005
  chunk_size: 512
report_interval_s: 0.5
log_level: debug
"""


@pytest.fixture
def config_file(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(CONFIG_YAML)
    return path


def test_load_config(config_file):
    cfg = Config(str(config_file))

    window = cfg.window_params()
    assert window == WindowParams(16, I32_BE, ReconstructorStrategy.COPYING, 64)

    source = cfg.source_params()
    assert source.enable
    assert (source.ip, source.port, source.chunk_size) == ("127.0.0.1", 5005, 512)

    assert cfg.report_interval_s == 0.5
    assert cfg.log_level == "DEBUG"


def test_defaults_for_empty_file(tmp_path):
    path = tmp_path / "empty.yaml"
    path.write_text("")
    cfg = Config(str(path))

    window = cfg.window_params()
    assert window.capacity == DEFAULT_CAPACITY
    assert window.encoding is F32_LE
    assert window.strategy is ReconstructorStrategy.SLICE
    assert not cfg.source_params().enable
    assert cfg.report_interval_s == DEFAULT_REPORT_INTERVAL_S
    assert cfg.log_level == "INFO"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        Config(str(tmp_path / "nope.yaml"))


@pytest.mark.parametrize(
    "props, error",
    [
        ({"capacity": 0}, CapacityError),
        ({"encoding": "i24_le"}, ValueError),
        ({"strategy": "mmap"}, ValueError),
        ({"recompute_every": -1}, ValueError),
    ],
)
def test_invalid_window_params(props, error):
    with pytest.raises(error):
        WindowParams.from_dict(props)


def test_source_params():
    params = SourceParams.from_dict({"filename": "data/x.bin"})
    assert params.enable
    assert params.chunk_size == DEFAULT_CHUNK_SIZE

    serial = SourceParams.from_dict({"serial": {"port_name": "/dev/ttyACM0", "baud_rate": 9600}})
    assert serial.enable
    assert (serial.serial_port, serial.baud_rate) == ("/dev/ttyACM0", 9600)

    assert not SourceParams.from_dict({}).enable


@pytest.mark.parametrize(
    "props",
    [
        {"ip": "localhost:5005"},
        {"ip": "300.1.1.1:5005"},
        {"ip": "10.0.0.1:70000"},
        {"filename": "x.bin", "chunk_size": 0},
    ],
)
def test_invalid_source_params(props):
    with pytest.raises(ValueError):
        SourceParams.from_dict(props)


def test_ip_must_be_a_string():
    with pytest.raises(TypeError):
        SourceParams.from_dict({"ip": 5005})
