import io
import logging

from nsaudit.config import AuditConfig
from nsaudit.logging_config import AuditLogFormatter, init_logging


def test_defaults_from_empty_env():
    cfg = AuditConfig.from_env({})
    assert cfg.resolver == "8.8.8.8"
    assert cfg.port == 53
    assert cfg.timeout == 2.0
    assert cfg.deadline == 60.0
    assert cfg.cache_ttl == 3600.0
    assert cfg.enrich is True
    assert cfg.probe is True


def test_env_overrides():
    cfg = AuditConfig.from_env(
        {
            "NSAUDIT_RESOLVER": "192.0.2.53",
            "NSAUDIT_PORT": "5353",
            "NSAUDIT_TIMEOUT": "0.5",
            "NSAUDIT_DEADLINE": "15",
            "NSAUDIT_CACHE_TTL": "60",
            "NSAUDIT_ENRICH": "0",
            "NSAUDIT_PROBE": "false",
            "NSAUDIT_LOG_LEVEL": "debug",
        }
    )
    assert cfg.resolver == "192.0.2.53"
    assert cfg.port == 5353
    assert cfg.timeout == 0.5
    assert cfg.deadline == 15.0
    assert cfg.cache_ttl == 60.0
    assert cfg.enrich is False
    assert cfg.probe is False
    assert cfg.log_level == "debug"


def test_init_logging_sets_level_and_format():
    stream = io.StringIO()
    root = logging.getLogger()
    saved = (root.level, list(root.handlers))
    try:
        init_logging({"level": "warn", "stream": stream})
        assert root.level == logging.WARNING
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, AuditLogFormatter)

        logging.getLogger("nsaudit.test").info("dropped")
        logging.getLogger("nsaudit.test").warning("hello")
        logging.getLogger("nsaudit.test").error("boom")
        lines = stream.getvalue().splitlines()
        assert len(lines) == 2
        assert lines[0].endswith("[warn] nsaudit.test: hello")
        assert lines[1].endswith("[error] nsaudit.test: boom")
        assert lines[0][:20].endswith("Z")
    finally:
        root.handlers[:] = saved[1]
        root.setLevel(saved[0])
