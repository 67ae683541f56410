from train.core.errors import ErrorCode


def test_exit_codes_are_stable() -> None:
    assert int(ErrorCode.OK) == 0
    assert int(ErrorCode.USER_ERROR) == 1
    assert int(ErrorCode.ENV_ERROR) == 2
    assert int(ErrorCode.GIT_ERROR) == 3
    assert int(ErrorCode.IO_ERROR) == 5


def test_str_and_success() -> None:
    assert str(ErrorCode.GIT_ERROR) == "git error"
    assert ErrorCode.OK.is_success
    assert not ErrorCode.USER_ERROR.is_success
