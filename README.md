# jpegppm

A small decoder for baseline JPEG images. It reads a `.jpg` or `.jpeg`
file and writes the picture as a binary PGM (greyscale, `P5`) or PPM
(colour, `P6`) file.

Decoding goes through the baseline stages one after another: header
parsing, Huffman decoding of the scan, inverse quantisation, inverse
zigzag and IDCT, chroma upsampling by pixel duplication, and YCbCr to RGB
conversion.

## Installation

```
pip install .
```

## Command line

```
jpeg2ppm picture.jpg
```

The output is written to the current directory. It is named after the
input file, without its directory and without a trailing `.jpg` or
`.jpeg`: `picture.pgm` for a one-component image, `picture.ppm` for a
three-component image. Progress messages are printed as each stage runs.
The command exits with status 1 on a usage error, an unreadable file or
malformed JPEG data, and prints the reason to standard error.

## Library use

```python
from jpegppm.cli import decode_jpeg
from jpegppm.ppm import output_path, render_image, write_image

full_size, real_size, planes, count = decode_jpeg("picture.jpg")
data = render_image(full_size, real_size, planes, count)  # whole file as bytes
write_image(full_size, real_size, planes, count, "photos/picture.jpg")  # writes picture.ppm

print(output_path("photos/picture.jpg"))  # picture
```

`decode_jpeg` returns the padded (height, width), the real (height,
width), the planes of 8x8 pixel blocks (grey, or R, G, B) and the
component count.

The stages are available from their own modules:

- `jpegppm.header`: `parse_image_info`, `parse_quant_tables`,
  `parse_huffman_info`, `build_huffman_tables`, `parse_huffman_indices`,
  `init_component_info`, and the `ComponentInfo`, `HuffmanTable`,
  `HuffmanCode`, `ImageInfo` and `JpegFormatError` classes
- `jpegppm.decoding`: `extract_scan_data`, `BitReader`, `decode_block`,
  `decode_mcu_blocks`, `magnitude_to_coefficient`, `pixel_dup`, `upsample`
- `jpegppm.quantization`: `dequantize`
- `jpegppm.idct`: `zigzag_inverse`, `idct_vector`, `fast_idct`,
  `scalar_idct` (direct reference transform), `blocks_to_pixels`
- `jpegppm.color`: `ycbcr_to_rgb`, `saturate_rgb`
- `jpegppm.ppm`: `output_path`, `render_image`, `write_image`

Malformed or unsupported data raises `jpegppm.header.JpegFormatError`, a
subclass of `ValueError`.

## Limits

- Only baseline sequential JPEG (the `SOF0` frame) is read; progressive
  and other frame types are not decoded.
- Only images with one or three colour components are converted.
- Only the first scan is decoded; restart markers are skipped.
- The output is always written to the current directory, with no option
  to choose another name or place.

## Tests

```
pip install .[test]
pytest
```