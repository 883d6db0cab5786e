# neocities

A small command-line client and Python library for the Neocities API.
With it you can upload, delete and list the files of your site, read
site information and fetch an API key.

## Installation

    pip install .

To run the tests as well:

    pip install ".[test]"
    pytest

## Setting up credentials

The client reads its credentials from the environment. Either give your
user name and password:

    export NEOCITIES_USER=<username>
    export NEOCITIES_PASS=<password>

or an API key, which is used instead when it is set:

    export NEOCITIES_API_KEY=<key>

If neither is usable, the client prints which variable is missing and
exits. Set `NEOCITIES_VERBOSE=true` to have the API's reply printed
after uploads and deletions.

## Commands

    neocities upload <filename> [<another filename>]
    neocities upload-root
    neocities delete <filename> [<another filename>]
    neocities delete-all
    neocities info [sitename]
    neocities key
    neocities list
    neocities version
    neocities help [command]

- `upload` sends the given files. Directories are walked and every file
  inside is sent under its relative path.
- `upload-root` sends everything in the current directory except
  `.DS_Store`.
- `delete` removes the given remote files.
- `delete-all` removes every remote file except `index.html`; a remote
  directory is named once instead of each file inside it.
- `info` prints the JSON information for your site, or for another site
  if you name it.
- `key` prints an API key for your account.
- `list` prints the remote file listing as indented JSON.
- `version` prints the client's version number.
- `help` prints the overview, or the usage of the named command.

Run `neocities` with no arguments to see the overview of commands. An
unknown command does nothing. When an upload, deletion or info request
fails, the API's reply is printed and the client exits with status 1.

## Using the library

```python
from neocities.credentials import Credentials
from neocities import api

credentials = Credentials(key="placeholder")

listing = api.list_files(credentials)
for entry in listing.files:
    print(entry.path, entry.is_directory)

response = api.upload(credentials, [api.UploadData("hello.html", b"<p>hi</p>")])
response.print()
```

The module `neocities.api` also offers `delete_files`, `site_info`,
`key` and `upload_files`, and a `build_*_request` function for each
call that returns the prepared request without sending it.

A reply that does not have status 200 raises `api.UnexpectedStatusCode`.
That error carries the parsed response in `response` and the status in
`status_code`, so you can still print the reply. A body that is not
JSON raises `ValueError`.