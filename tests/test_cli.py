from httpgen import cli


def test_defaults_match_flag_surface():
    args = cli.build_parser().parse_args([])
    config = cli.config_from_args(args)

    assert config.url == "http://example.com"
    assert config.requests == 10
    assert config.method == "GET"
    assert config.timeout == 10
    assert config.interval_ms == 0
    assert config.output == "results.json"
    assert config.error_log == "errors.log"
    assert config.max_concurrent == 5
    assert config.show_progress


def test_flags_are_parsed():
    args = cli.build_parser().parse_args([
        "--url", "http://localhost:9000/x", "-n", "3", "--method", "put",
        "--body", "b", "--timeout", "2.5", "--headers", "A=1,B=2",
        "--interval", "20", "--maxconcurrent", "8", "--quiet",
    ])
    config = cli.config_from_args(args)

    assert config.method == "PUT"
    assert config.headers == {"A": "1", "B": "2"}
    assert config.timeout == 2.5
    assert config.to_launch_config().interval == 0.02
    assert config.max_concurrent == 8
    assert not config.show_progress


def test_zero_requests_prints_summary(tmp_path, capsys):
    code = cli.main([
        "-n", "0", "--quiet",
        "--output", str(tmp_path / "results.json"),
        "--errorlog", str(tmp_path / "errors.log"),
    ])

    assert code == 0
    out = capsys.readouterr().out
    assert "All requests completed" in out
    assert "Total requests: 0" in out
    assert "Failed requests: 0" in out


def test_unopenable_output_exits_with_error(tmp_path, capsys):
    code = cli.main([
        "-n", "1", "--quiet",
        "--output", str(tmp_path / "missing" / "results.json"),
        "--errorlog", str(tmp_path / "errors.log"),
    ])

    assert code == 1
    assert "Error opening result file" in capsys.readouterr().err
    assert not (tmp_path / "errors.log").exists()


def test_invalid_method_exits_with_error(capsys):
    assert cli.main(["--method", "FETCH", "--quiet"]) == 1
    assert "Invalid method" in capsys.readouterr().err
