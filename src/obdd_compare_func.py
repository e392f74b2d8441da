# Copyright 2022 Grabtaxi Holdings Pte Ltd (GRAB), All rights reserved.

# Use of this source code is governed by an MIT-style license that can be found in the LICENSE file

import argparse
import logging
import sys

import obdd_inference
import obdd_parser
from obdd_comparator import ObddComparator
from obdd_exceptions import ObddError
from obdd_logical import Logical

logger = logging.getLogger(__name__)


def parse_weight_file(weight_file):
    '''
    Each line holds "variable,weight", the weight being the probability that the variable is true.
    Returns a dictionary of variable : weight
    '''
    with open(weight_file) as f:
        lines = f.read().strip().split('\n')
    weights = {}
    for line in lines:
        if line.strip() == '':
            continue
        try:
            variable, weight = line.split(',')
            weights[int(variable)] = float(weight)
        except ValueError as e:
            raise ValueError('Malformed weight line "' + line.strip() + '" in ' + weight_file) from e
    return weights


def describe_graph(label, graph, weights=None):
    '''Returns the summary lines printed for one graph'''
    output_lines = [
        label + ': ' + repr(graph),
        label + ' models: ' + str(obdd_inference.count_models(graph)),
    ]
    if weights is not None:
        output_lines.append(label + ' probability: ' + str(obdd_inference.calculate_prob_hp(graph, weights)))
    return output_lines


def run_comparison(first_file, second_file, logical, weights=None):
    '''
    Parses both obdd files and compares them.
    Returns the lines to print.
    '''
    _, first_graph = obdd_parser.parse_obdd(first_file)
    _, second_graph = obdd_parser.parse_obdd(second_file)

    comparator = ObddComparator()
    result = comparator.compare_with(first_graph, second_graph, logical)
    ordering = comparator.compare(first_graph, second_graph)

    output_lines = ['Result of ' + logical.name + ' comparison: ' + str(result), 'Ordering: ' + str(ordering)]
    output_lines += describe_graph('First obdd', first_graph, weights)
    output_lines += describe_graph('Second obdd', second_graph, weights)
    return output_lines


def main(argv=None):
    script_description = 'Compares two obdd files with a logical operator'

    parser = argparse.ArgumentParser(description=script_description)

    parser.add_argument('--first_file', type=str, help='/location/to/first.obdd', dest='first_file', required=True)

    parser.add_argument('--second_file', type=str, help='/location/to/second.obdd', dest='second_file', required=True)

    parser.add_argument('--operator', type=str, default='AND', choices=[logical.name for logical in Logical], help='logical operator used to combine the outcomes', dest='operator')

    parser.add_argument('--weights_file', type=str, default='', help='file with "variable,weight" lines, prints the probability of each obdd being true', dest='weights_file')

    parser.add_argument('--log_level', type=str, default='WARNING', help='logging level, for example INFO or DEBUG', dest='log_level')

    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.WARNING),
                        format='%(asctime)s %(levelname)s %(name)s: %(message)s')

    try:
        weights = parse_weight_file(args.weights_file) if args.weights_file != '' else None
        output_lines = run_comparison(args.first_file, args.second_file, Logical.from_name(args.operator), weights)
    except (ObddError, OSError, ValueError) as e:
        logger.debug('Comparison failed', exc_info=True)
        print('Error: ' + str(e), file=sys.stderr)
        return 1

    for line in output_lines:
        print(line)
    return 0


if __name__ == '__main__':
    sys.exit(main())
