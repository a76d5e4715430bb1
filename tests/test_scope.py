from registry.scope import RequestScope


def test_newer_request_supersedes_older():
    scope = RequestScope()
    first = scope.begin()
    second = scope.begin()

    assert not scope.is_current(first)
    assert scope.is_current(second)


def test_close_discards_in_flight_result():
    scope = RequestScope()
    token = scope.begin()

    scope.close()

    assert scope.closed
    assert not scope.is_current(token)


def test_begin_after_close_reopens():
    scope = RequestScope()
    scope.begin()
    scope.close()

    token = scope.begin()

    assert scope.is_current(token)
    assert not scope.closed
