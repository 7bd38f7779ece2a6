from rle.rle import MalformedEncoding, decode, encode
