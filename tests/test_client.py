import json
import unittest
from unittest import mock

import requests

from dfsshell.client import DFSClientError, WebHDFSClient


def make_response(status=200, body=None, content=b"", headers=None):
    response = requests.Response()
    response.status_code = status
    response._content = json.dumps(body).encode() if body is not None else content
    response.headers.update(headers or {})
    response.url = "http://nn:9870/webhdfs/v1/"
    return response


def file_status(suffix, kind="FILE", length=0, permission="644"):
    return {
        "pathSuffix": suffix,
        "type": kind,
        "length": length,
        "permission": permission,
        "modificationTime": 1700000000000,
        "accessTime": 1700000000000,
        "owner": "alice",
        "group": "supergroup",
        "replication": 3 if kind == "FILE" else 0,
        "blockSize": 134217728,
    }


class TestWebHDFSClient(unittest.TestCase):
    def setUp(self):
        self.client = WebHDFSClient("http://nn:9870/", user="alice", timeout=5)
        self.session = mock.MagicMock()
        self.client.session = self.session

    def test_home_directory(self):
        self.session.request.return_value = make_response(body={"Path": "/user/alice"})

        self.assertEqual(self.client.home_directory(), "/user/alice")
        self.session.request.assert_called_once_with(
            "GET",
            "http://nn:9870/webhdfs/v1/",
            params={"op": "GETHOMEDIRECTORY", "user.name": "alice"},
            timeout=5,
            allow_redirects=True,
        )

    def test_ls_converts_and_sorts(self):
        self.session.request.return_value = make_response(body={
            "FileStatuses": {"FileStatus": [
                file_status("zeta.txt", length=12),
                file_status("data", kind="DIRECTORY", permission="755"),
            ]}
        })

        files = self.client.ls("/user/alice")

        self.assertEqual([f["name"] for f in files], ["data", "zeta.txt"])
        self.assertEqual(files[0]["path"], "/user/alice/data")
        self.assertTrue(files[0]["isDir"])
        self.assertEqual(files[0]["mode"], 0o755)
        self.assertEqual(files[1]["size"], 12)
        self.assertFalse(files[1]["isDir"])

    def test_stat_names_file_after_path(self):
        self.session.request.return_value = make_response(
            body={"FileStatus": file_status("", length=3)}
        )

        info = self.client.stat("/user/alice/a.txt")

        self.assertEqual(info["name"], "a.txt")
        self.assertEqual(info["path"], "/user/alice/a.txt")
        self.assertEqual(info["replication"], 3)

    def test_paths_are_quoted(self):
        self.session.request.return_value = make_response(body={"boolean": True})

        self.client.mkdir("/tmp/with space", permission=0o755)

        args, kwargs = self.session.request.call_args
        self.assertEqual(args, ("PUT", "http://nn:9870/webhdfs/v1/tmp/with%20space"))
        self.assertEqual(kwargs["params"]["op"], "MKDIRS")
        self.assertEqual(kwargs["params"]["permission"], "755")

    def test_remote_exception_message(self):
        self.session.request.return_value = make_response(404, body={
            "RemoteException": {
                "exception": "FileNotFoundException",
                "javaClassName": "java.io.FileNotFoundException",
                "message": "File does not exist: /missing",
            }
        })

        with self.assertRaises(DFSClientError) as ctx:
            self.client.stat("/missing")
        self.assertEqual(str(ctx.exception), "File does not exist: /missing")
        self.assertEqual(ctx.exception.exception, "FileNotFoundException")
        self.assertTrue(ctx.exception.not_found)

    def test_status_code_without_body(self):
        self.session.request.return_value = make_response(403, content=b"forbidden")

        with self.assertRaises(DFSClientError) as ctx:
            self.client.ls("/secret")
        self.assertEqual(str(ctx.exception), "Permission denied")
        self.assertFalse(ctx.exception.not_found)

    def test_connection_refused(self):
        self.session.request.side_effect = requests.exceptions.ConnectionError("refused")

        with self.assertRaises(DFSClientError) as ctx:
            self.client.home_directory()
        self.assertEqual(
            str(ctx.exception), "Connection refused - namenode not reachable at nn:9870"
        )

    def test_timeout(self):
        self.session.request.side_effect = requests.exceptions.ReadTimeout()

        with self.assertRaises(DFSClientError) as ctx:
            self.client.cat("/big")
        self.assertEqual(str(ctx.exception), "Request timeout after 5s")

    def test_exists(self):
        self.session.request.side_effect = [
            make_response(body={"FileStatus": file_status("")}),
            make_response(404),
        ]

        self.assertTrue(self.client.exists("/there"))
        self.assertFalse(self.client.exists("/gone"))

    def test_write_follows_datanode_redirect(self):
        self.session.request.side_effect = [
            make_response(307, headers={"Location": "http://dn:9864/webhdfs/v1/f?op=CREATE"}),
            make_response(201),
        ]

        self.client.write("/f", b"payload", overwrite=True)

        first, second = self.session.request.call_args_list
        self.assertEqual(first.kwargs["params"]["op"], "CREATE")
        self.assertEqual(first.kwargs["params"]["overwrite"], "true")
        self.assertFalse(first.kwargs["allow_redirects"])
        self.assertEqual(second.args, ("PUT", "http://dn:9864/webhdfs/v1/f?op=CREATE"))
        self.assertEqual(second.kwargs["data"], b"payload")

    def test_write_without_location(self):
        self.session.request.return_value = make_response(200)

        with self.assertRaises(DFSClientError):
            self.client.write("/f", b"payload")

    def test_cat_offset_and_length(self):
        self.session.request.return_value = make_response(content=b"tail")

        self.assertEqual(self.client.cat("/f", offset=10, length=4), b"tail")
        params = self.session.request.call_args.kwargs["params"]
        self.assertEqual(params["offset"], "10")
        self.assertEqual(params["length"], "4")

    def test_malformed_response(self):
        self.session.request.return_value = make_response(body={"unexpected": 1})

        with self.assertRaises(DFSClientError):
            self.client.content_summary("/")


if __name__ == "__main__":
    unittest.main()
