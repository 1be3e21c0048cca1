from fleetrel.core.errors import ErrorCode


def test_codes_are_stable() -> None:
    assert int(ErrorCode.OK) == 0
    assert int(ErrorCode.USER_ERROR) == 1
    assert int(ErrorCode.ENV_ERROR) == 2
    assert int(ErrorCode.BUILD_ERROR) == 3
    assert int(ErrorCode.NETWORK_ERROR) == 4


def test_str_and_success() -> None:
    assert str(ErrorCode.BUILD_ERROR) == "build error"
    assert ErrorCode.OK.is_success
    assert not ErrorCode.USER_ERROR.is_success
