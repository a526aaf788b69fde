import logging
import colorlog
import argparse
import json
import sys
from typing import Optional

from maths.config import ConverterConfig
from maths.splines import Spline, SplineToBezier, SplineType
from utils.draw_stack import render_flattening
from utils.spline_file import create_spline, flattening_to_dict, load_spline, parse_points

handler = colorlog.StreamHandler()
handler.setFormatter(colorlog.ColoredFormatter(
    '%(blue)s[%(asctime)s]%(reset)s %(log_color)s[%(levelname)s]%(reset)s %(purple)s[%(filename)s:%(lineno)d]%(reset)s: %(message)s',
    datefmt='%H:%M:%S',
    log_colors={
        'DEBUG': 'cyan',
        'INFO': 'green',
        'WARNING': 'yellow',
        'ERROR': 'red',
        'CRITICAL': 'red,bg_white',
    },
    secondary_log_colors={
        'message': {
            'DEBUG': 'cyan',
            'INFO': 'green',
            'WARNING': 'yellow',
            'ERROR': 'red',
            'CRITICAL': 'red',
        }
    },
    style='%'
))

logger = logging.getLogger()
logger.setLevel(logging.INFO)
logger.handlers = [handler]


def read_spline(args) -> Spline:
    if args.input:
        return load_spline(args.input)
    if args.points:
        return create_spline(SplineType.from_name(args.type), parse_points(args.points), args.closed, args.tension)
    raise ValueError("Specify a spline with --input or --points")


def convert(spline: Spline, config: ConverterConfig, tolerance: Optional[float] = None, output: Optional[str] = None):
    flattening = SplineToBezier(config).convert(spline, tolerance)
    logging.info(f"Approximated {spline.point_count()} knots with {len(flattening.quads)} quads")
    text = json.dumps(flattening_to_dict(flattening), indent=2)

    if output:
        with open(output, "w") as f:
            f.write(text)
        logging.info(f"Flattening saved to {output}")
    else:
        print(text)


def render(spline: Spline, config: ConverterConfig, image_path: str, tolerance: Optional[float] = None,
           width: int = 800, height: int = 600):
    flattening = SplineToBezier(config).convert(spline, tolerance)
    render_flattening(flattening, width=width, height=height, output_path=image_path, knots=spline.get_points())


def add_spline_arguments(parser: argparse.ArgumentParser):
    parser.add_argument('--input', help='JSON spline description file')
    parser.add_argument('--points', help='Knots as "x,y x,y ..."')
    parser.add_argument('--type', default='cubicbezier', choices=['cartesian', 'catmullrom', 'cubicbezier'],
                        help='Spline type for --points')
    parser.add_argument('--closed', action='store_true', help='Close the spline for --points')
    parser.add_argument('--tension', type=float, default=0.5, help='Cubic Bezier spline tension in [0,1]')
    parser.add_argument('--tolerance', type=float, default=None, help='Closeness tolerance')
    parser.add_argument('--verbose', action='store_true', help='Enable debug logging')


def parse_args():
    parser = argparse.ArgumentParser(description='Spline to quadratic Bezier approximation')
    subparsers = parser.add_subparsers(dest='command', help='Available commands')

    convert_parser = subparsers.add_parser('convert', help='Convert a spline to a quad. Bezier sequence')
    add_spline_arguments(convert_parser)
    convert_parser.add_argument('--output', help='Output JSON file, stdout if omitted')

    render_parser = subparsers.add_parser('render', help='Render the quad. Bezier sequence of a spline')
    add_spline_arguments(render_parser)
    render_parser.add_argument('--image', default='spline.png', help='Output PNG file')
    render_parser.add_argument('--width', type=int, default=800, help='Image width')
    render_parser.add_argument('--height', type=int, default=600, help='Image height')

    return parser.parse_args()


if __name__ == "__main__":
    args = parse_args()

    if args.command is None:
        logger.error("Please specify a command. Use --help for more information.")
        sys.exit(1)

    if args.verbose:
        logger.setLevel(logging.DEBUG)

    config = ConverterConfig()
    logging.debug(f"Converter settings: {config.to_args()}")

    try:
        spline = read_spline(args)
        if args.command == 'convert':
            convert(spline, config, tolerance=args.tolerance, output=args.output)
        elif args.command == 'render':
            render(spline, config, args.image, tolerance=args.tolerance, width=args.width, height=args.height)
    except (ValueError, FileNotFoundError) as e:
        logging.error(str(e))
        sys.exit(1)
