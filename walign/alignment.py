from collections import namedtuple


# One alignment link: 0-based source position and 0-based target position.
Edge = namedtuple('Edge', ['source', 'target'])


class Alignment:
    """
    The alignment of a single sentence pair.

    Each target position appears in at most one edge.
    Target positions without an edge are aligned to NULL.
    """

    def __init__(self, edges=None):
        self.edges = [Edge(*edge) for edge in edges] if edges is not None else []

    def add(self, source: int, target: int):
        self.edges.append(Edge(source, target))

    def source_of(self, target: int):
        """Return the source position aligned to a target position (None for NULL)"""
        for edge in self.edges:
            if edge.target == target:
                return edge.source
        return None

    def __iter__(self):
        return iter(self.edges)

    def __len__(self):
        return len(self.edges)

    def __eq__(self, other):
        return isinstance(other, Alignment) and self.edges == other.edges

    def __str__(self):
        """Moses-style links, e.g. '0-0 2-1'"""
        return ' '.join('{0}-{1}'.format(edge.source, edge.target) for edge in self.edges)

    def __repr__(self):
        return 'Alignment(%r)' % self.edges
