# gupshup_gui

A small Flask HTTP server that sits in front of the Gupshup partner API. At
startup it logs in with your partner account and keeps the partner token in
memory for an hour. It fetches per-app tokens when they are needed and caches
them. It also exposes JSON routes for listing apps, for reading and creating
WhatsApp message templates, and for storing uploaded images locally.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Configuration

The partner credentials come from the environment variables `EMAIL` and
`SENHA`. Before it reads them, the server loads a dotenv file (`.env` by
default). Variables that are already set keep their values. For example:

```
EMAIL=someone@example.com
SENHA=password
```

If either variable is missing or the login is rejected, the command prints
the error to standard error and exits with status 1.

## Running

```
gupshup-gui
```

Options:

| Option | Default | Meaning |
|--------|---------|---------|
| `--host` | `0.0.0.0` | Address to listen on |
| `--port` | `8080` | Port to listen on |
| `--env-file` | `.env` | Dotenv file loaded before logging in |
| `--upload-dir` | `internal/app/tmp` | Directory where uploaded images are stored |

## Routes

| Method | Path | Purpose |
|--------|------|---------|
| GET  | `/auth/token` | Current partner token and its expiry (Unix seconds) |
| GET  | `/partner/apps` | List of partner apps |
| GET  | `/partner/apps/<app_id>/token` | Token of one app, as `{"token_app": {...}}` |
| GET  | `/app/apps/<app_id>/templates` | Templates of an app |
| GET  | `/app/apps/<app_id>/templates/<template_id>` | One template |
| POST | `/app/apps/<app_id>/templates` | Create a `TEXT` or `IMAGE` template |
| POST | `/app/upload/image/<app_id>` | Store uploaded files locally |

Errors come back as JSON with `message`, `error` and `code`. Where it helps,
a `causes` list names the field at fault. An unknown path, or a known path
called with a method it does not accept, gets a 404 whose body holds `erro`,
`status`, `path` and `method`.

### App tokens

The partner API can answer an app-token request with 429. In that case the
server logs in again, waits two seconds and tries again, up to ten attempts.

### Creating a template

Post JSON such as:

```json
{
  "elementName": "order_update",
  "vertical": "Order update",
  "languageCode": "pt_BR",
  "category": "UTILITY",
  "templateType": "TEXT",
  "content": "Hello {{1}}, your order {{2}} has shipped."
}
```

The fields `elementName`, `vertical` (3 to 70 characters), `languageCode`,
`category`, `templateType` and `content` are required. The optional fields
are:

- `header`
- `footer`
- `buttons`
- `example`
- `exampleHeader`
- `images`
- `isLTO`
- `limitedOfferText`
- `hasExpiration`
- `cards`
- `codeExpirationMinutes`
- `addSecurityRecommendation`

If `example` is left out, it is filled in from the content: each `{{n}}`
placeholder becomes `Variaveln`. The same applies to `exampleHeader` when a
`header` is given.

Only `TEXT` and `IMAGE` are accepted as `templateType`. An `IMAGE` template
needs exactly one local file path in `images`. That file is uploaded to the
partner API, and the template is created with the media handle the API
returns.

### Uploading images

Send a `multipart/form-data` request with one or more files in the `file`
field. Each file may be up to 5 MB and the whole request up to 20 MB. Each
file is saved in the upload directory as `name_<uuid>.ext`, and the response
lists the saved paths under `arquivosSalvos`. Pass one of these paths in
`images` when you create an `IMAGE` template.

## Using it as a library

`gupshup_gui.server.create_app(login_controller, app_controller,
template_controller, upload_dir)` builds the Flask application. Any
controller left as `None` is built with default services, but
`create_app` does not log in by itself. Call
`LoginController.handle_login()` first, as `gupshup_gui.server.main` does.

The building blocks are:

- `gupshup_gui.auth`: `LoginService`, `LoginController` and `TokenStore`
- `gupshup_gui.apps`: `PartnerAppService`
- `gupshup_gui.templates`: `TemplateService`
- `gupshup_gui.partner`: `PartnerService`, `AppController` and `TemplateController`

The blueprints come from `gupshup_gui.routes` and
`gupshup_gui.template_routes`.

## What it does not do

- Tokens live only in process memory. Nothing is persisted, and a restart
  logs in again.
- Uploaded files are never deleted automatically.
  `gupshup_gui.uploads.remove_file` is available if you want to clean them up.
- There is no graphical interface. The package is an HTTP server that speaks
  JSON.