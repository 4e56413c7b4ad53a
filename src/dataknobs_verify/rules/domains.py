"""Default domain lists used by the disposable-address rules."""

DISPOSABLE_EMAIL_DOMAINS: tuple[str, ...] = (
    "@yopmail",
    "@ymail",
    "@jetable",
    "@trashmail",
    "@jvlicenses",
    "@temp-mail",
    "@emailnax",
    "@datakop",
)

# URL shorteners, temporary file hosts, free subdomain services and tunnels
DISPOSABLE_URL_DOMAINS: tuple[str, ...] = (
    "bit.ly", "tinyurl.com", "goo.gl", "ow.ly", "t.co", "is.gd", "buff.ly",
    "adf.ly", "bc.vc", "soo.gd", "clk.im", "s2r.co", "shrtco.de", "rb.gy",
    "cutt.ly", "short.io", "tiny.cc",
    "file.io", "transfer.sh", "temp.sh", "tmpfiles.org", "0x0.st", "uguu.se",
    "catbox.moe", "litterbox.catbox.moe", "pixeldrain.com", "gofile.io",
    "anonfiles.com", "bayfiles.com",
    "000webhostapp.com", "freehosting.com", "freehostia.com", "x10hosting.com",
    "byethost.com", "5gbfree.com", "freewha.com",
    "ngrok.io", "ngrok-free.app", "localtunnel.me", "serveo.net", "localhost.run",
)
