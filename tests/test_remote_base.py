import logging
from urllib.parse import parse_qs, urlparse

import pytest
import requests

from placeholder import BASE_URL, Comment, Post, make_comments, make_posts
from retrofire import DecodeError, ErrorResponse, RemoteBase, RequestBuilder, TransportError, settings
from retrofire.remote.base import detail_message


def test_find_post_returns_single_object(remote, requests_mock, eventually):
    requests_mock.get(f"{BASE_URL}/posts/1/", json=make_posts(1)[0])
    responses = []

    remote.find_post(1).on_success(responses.append).on_failed(lambda error: None).call()

    assert eventually(lambda: responses)
    assert responses[0] == Post(user_id=1, id=1, title="title 1", body="body 1")


def test_posts_returns_full_list(remote, requests_mock, eventually):
    requests_mock.get(f"{BASE_URL}/posts", json=make_posts())
    responses = []

    remote.posts().on_success(responses.append).on_failed(lambda error: None).call()

    assert eventually(lambda: responses)
    assert len(responses[0]) == 100
    assert responses[0][0].id == 1


def test_post_comments_with_one_query_parameter(remote, requests_mock):
    requests_mock.get(f"{BASE_URL}/comments?postId=1", json=make_comments(1))

    comments = remote.post_comments(1).result(timeout=5)

    assert len(comments) == 5
    assert comments[0].id == 1
    assert isinstance(comments[0], Comment)
    query = parse_qs(urlparse(requests_mock.last_request.url).query)
    assert query == {"postId": ["1"]}


def test_posts_comments_with_many_query_parameters(remote, requests_mock):
    requests_mock.get(f"{BASE_URL}/comments", json=make_comments(2, count=1, first_id=6))

    comments = remote.posts_comments(2, "Presley.Mueller@myrl.com").result(timeout=5)

    assert [comment.id for comment in comments] == [6]
    query = parse_qs(urlparse(requests_mock.last_request.url).query)
    assert query == {"postId": ["2"], "email": ["Presley.Mueller@myrl.com"]}


def test_create_post_echoes_saved_object(remote, requests_mock):
    requests_mock.post(
        f"{BASE_URL}/posts",
        status_code=201,
        json={"userId": 1, "id": 101, "title": "Some Title", "body": "Some Body"},
    )

    post = remote.create_post(1, "Some Title", "Some Body").result(timeout=5)

    assert (post.user_id, post.title, post.body) == (1, "Some Title", "Some Body")
    assert requests_mock.last_request.json() == {"userId": 1, "title": "Some Title", "body": "Some Body"}


def test_update_post_echoes_saved_object(remote, requests_mock):
    requests_mock.put(
        f"{BASE_URL}/posts/1",
        json={"userId": 1, "id": 1, "title": "Some Title", "body": "Some Body"},
    )

    post = remote.update_post(1, 1, "Some Title", "Some Body").result(timeout=5)

    assert requests_mock.last_request.method == "PUT"
    assert (post.user_id, post.title, post.body) == (1, "Some Title", "Some Body")


def test_update_missing_post_yields_error_response(remote, requests_mock, eventually):
    requests_mock.put(f"{BASE_URL}/posts/102292", status_code=404, json={})
    failures = []

    remote.update_post(102292, 123123, "Some Title", "Some Body").on_failed(failures.append).call()

    assert eventually(lambda: failures)
    error = failures[0]
    assert isinstance(error, ErrorResponse)
    assert error.status_code == 404
    assert error.url == "http://jsonplaceholder.typicode.com/posts/102292"
    assert error.detail_message == ""


def test_error_response_carries_server_detail(remote, requests_mock):
    requests_mock.get(f"{BASE_URL}/posts", status_code=503, json={"message": "maintenance"})

    with pytest.raises(ErrorResponse) as info:
        remote.posts().result(timeout=5)

    assert info.value.status_code == 503
    assert info.value.detail_message == "maintenance"


def test_delete_post_succeeds_with_true(remote, requests_mock):
    requests_mock.delete(f"{BASE_URL}/posts/1", json={})

    assert remote.delete_post(1).result(timeout=5) is True


def test_malformed_list_element_fails_whole_call(remote, requests_mock):
    requests_mock.get(f"{BASE_URL}/comments", json=[{"id": 1}, {"postId": 1}])
    successes = []

    call = remote.post_comments(1).on_success(successes.append)

    with pytest.raises(DecodeError) as info:
        call.result(timeout=5)
    assert successes == []
    assert info.value.index == 1


def test_list_endpoint_returning_object_is_decode_failure(remote, requests_mock):
    requests_mock.get(f"{BASE_URL}/posts", json={"id": 1})

    with pytest.raises(DecodeError):
        remote.posts().result(timeout=5)


def test_non_json_success_body_is_decode_failure(remote, requests_mock):
    requests_mock.get(f"{BASE_URL}/posts/1/", text="<html></html>")

    with pytest.raises(DecodeError):
        remote.find_post(1).result(timeout=5)


def test_connection_failure_is_transport_error(remote, requests_mock):
    requests_mock.get(f"{BASE_URL}/posts", exc=requests.exceptions.ConnectTimeout)

    with pytest.raises(TransportError):
        remote.posts().result(timeout=5)


def test_returned_call_is_not_dispatched_before_call(remote, requests_mock):
    requests_mock.get(f"{BASE_URL}/posts", json=[])

    remote.posts()

    assert requests_mock.call_count == 0


def test_call_single_without_model_raises(transport):
    request = RequestBuilder(f"{BASE_URL}/posts/1").build()

    with pytest.raises(TypeError):
        RemoteBase(transport).call_single(request)


def test_remote_uses_default_transport_when_none_given(monkeypatch):
    sentinel = object()
    monkeypatch.setattr("retrofire.remote.base.get_default_transport", lambda: sentinel)

    assert RemoteBase().transport is sentinel


@pytest.mark.parametrize(
    "body, expected",
    [
        (b"", ""),
        (b"{}", ""),
        (b"not json", ""),
        (b"[1, 2]", ""),
        (b'{"detail": "gone"}', "gone"),
        (b'{"error": "bad"}', "bad"),
        (b'{"message": 5}', ""),
    ],
)
def test_detail_message_extraction(body, expected):
    assert detail_message(body) == expected


@pytest.mark.parametrize("enabled", [True, False])
def test_bodies_are_logged_only_in_debug_mode(remote, requests_mock, caplog, monkeypatch, enabled):
    monkeypatch.setattr(settings, "DEBUG", enabled)
    caplog.set_level(logging.DEBUG, logger="retrofire.remote.base")
    requests_mock.post(f"{BASE_URL}/posts", status_code=201, json={"id": 101, "title": "Some Title"})

    remote.create_post(1, "Some Title", "Some Body").result(timeout=5)

    messages = [record.getMessage() for record in caplog.records if record.name == "retrofire.remote.base"]
    request_lines = [message for message in messages if message.startswith("Request body for")]
    response_lines = [message for message in messages if message.startswith("Response body for")]
    if enabled:
        assert request_lines and "Some Body" in request_lines[0]
        assert response_lines and "Some Title" in response_lines[0]
    else:
        assert request_lines == []
        assert response_lines == []
