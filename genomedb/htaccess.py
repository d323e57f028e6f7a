# genomedb/htaccess.py
"""
Apache configuration for serving precompressed track data.
"""

import re

DEFAULT_EXTENSIONS = (".jsonz", ".txtz")


def precompression_htaccess(*extensions: str) -> str:
    """
    Return .htaccess text that makes Apache serve precompressed files
    (.jsonz, .txtz, ...) with a gzip Content-Encoding header.

    Apache only honours it where AllowOverride permits FileInfo overrides.
    """
    extensions = extensions or DEFAULT_EXTENSIONS
    pattern = "(" + "|".join(re.escape(ext) for ext in extensions) + ")$"
    return f"""\
# this .htaccess file is generated by genomedb for serving
# precompressed files ({' '.join(extensions)}) with the proper Content-Encoding
# HTTP headers.  In order for Apache to pay attention to this, its
# AllowOverride configuration directive for this filesystem location
# must allow FileInfo overrides
<IfModule mod_gzip.c>
    mod_gzip_item_exclude "{pattern}"
</IfModule>
<IfModule setenvif.c>
    SetEnvIf Request_URI "{pattern}" no-gzip dont-vary
</IfModule>
<IfModule mod_headers.c>
  <FilesMatch "{pattern}">
    Header onsuccess set Content-Encoding gzip
  </FilesMatch>
</IfModule>
"""
