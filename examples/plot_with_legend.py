"""Example pipeline: lay out a plot with a legend and render it."""

from canvas_layout import (
    CanvasDimension,
    CanvasPart,
    Image,
    Line,
    Marker,
    make_coordinate_point,
    parse_color,
)


def main() -> None:
    image = Image(600, 400)
    master = image.master_canvas
    plot = master.floating_sub_canvas("plot")
    legend = plot.floating_sub_canvas("legend")
    plot.background = parse_color("#f0f0f0")
    legend.background = parse_color("#d0d0ff")
    legend.set_fixed_dimensions(width=100, height=40)

    image.relation_fix(master, CanvasPart.LEFT, plot, CanvasPart.LEFT, 50)
    image.relation_fix(master, CanvasPart.BOTTOM, plot, CanvasPart.BOTTOM, 40)
    image.relation_fix(plot, CanvasPart.RIGHT, master, CanvasPart.RIGHT, 20)
    image.scale_fix(plot, CanvasPart.TOP, master, CanvasDimension.Y, 0.9)
    image.relation_fix(legend, CanvasPart.RIGHT, plot, CanvasPart.RIGHT, 10)
    image.relation_fix(legend, CanvasPart.TOP, plot, CanvasPart.TOP, 10)

    for x in range(11):
        plot.add_shape(Marker(make_coordinate_point(x, x * x), size=5, color=parse_color("red")))
    plot.add_shape(Line(make_coordinate_point(0, 0), make_coordinate_point(10, 100)))

    snapshot = image.recompute()
    print("Method:", snapshot.solution.method)
    for canvas in (master, plot, legend):
        print(f"{canvas.name}: {canvas.location}")
    print("Plot coordinates:", plot.coordinate_description)

    image.to_bitmap().save("plot_with_legend.png")


if __name__ == "__main__":
    main()
