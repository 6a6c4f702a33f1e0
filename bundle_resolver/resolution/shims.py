"""Browser polyfills for Node built-in modules.

Maps a Node built-in specifier to the package specifier that replaces it when
bundling for a non-Node target. Only consulted when add_node_globals is set.
"""

NODE_SHIMS: dict[str, str] = {
    "_stream_duplex": "readable-stream/duplex.js",
    "_stream_passthrough": "readable-stream/passthrough.js",
    "_stream_readable": "readable-stream/readable.js",
    "_stream_transform": "readable-stream/transform.js",
    "_stream_writable": "readable-stream/writable.js",
    "assert": "assert/",
    "buffer": "buffer/",
    "console": "console-browserify",
    "constants": "constants-browserify",
    "crypto": "crypto-browserify",
    "domain": "domain-browser",
    "events": "events/",
    "http": "stream-http",
    "https": "https-browserify",
    "os": "os-browserify/browser.js",
    "path": "path-browserify",
    "process": "process/browser.js",
    "punycode": "punycode/",
    "querystring": "querystring-es3/",
    "stream": "stream-browserify",
    "string_decoder": "string_decoder/",
    "sys": "util/util.js",
    "timers": "timers-browserify",
    "tty": "tty-browserify",
    "url": "url/",
    "util": "util/util.js",
    "vm": "vm-browserify",
    "zlib": "browserify-zlib",
}
