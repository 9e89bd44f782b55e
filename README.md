# meatbags

Tracking people with 2D laser range finders.

meatbags talks to laser scanners that speak the SCIP 2.0 protocol over TCP.
It turns their range readings into points, groups the points into blobs with
DBSCAN, and follows those blobs from frame to frame. Polygon filters pick out
the regions you care about, and OSC messages over UDP report blobs, filter
occupancy and sensor status to other software.

## Installation

```
pip install .
```

For the test suite:

```
pip install .[test]
pytest
```

## Parts

- `meatbags.hokuyo.Hokuyo`: one sensor connection. The connection is opened
  in a background thread by `connect()`, and `update(elapsed)` is called once
  per tick. While connected it asks for status and version information, turns
  the laser on when it reports `OFF`, and polls for distances (with
  intensities when `call_intensities_active` is set) while the laser is `ON`.
  Replies are parsed into attributes such as `model`, `laser_state` and
  `status`, and each step becomes a point in millimetres in `coordinates`.
  While disconnected it clears its points and, if `auto_reconnect_active` is
  set, retries every `reconnection_timeout` seconds. `position_x`,
  `position_y` (metres), `sensor_rotation_deg` and `set_mirror_angles()` place
  the sensor; `info_lines()` returns its information as text lines.
- `meatbags.scip`: pieces of the wire format: the line checksum
  (`check_sum`), 6-bit character decoding (`decode_6bit`), line splitting
  (`split_lines`) and command formatting (`format_distance_command`,
  `format_motor_speed_command`).
- `meatbags.sensors.Sensors`: a group of sensors. `coordinates_and_intensities()`
  gathers the points of all sensors that lie inside an active filter and
  outside every active mask. `new_coordinates_available()` reports and clears
  the sensors' new-scan flags.
- `meatbags.dbscan.dbscan`: density-based clustering of 2D or 3D points,
  returning clusters as sorted lists of point indices.
- `meatbags.blob.Blob` and `meatbags.tracker.BlobTracker`: blobs built from
  clusters, matched to the blobs of earlier frames by centroid distance so that
  each one keeps its index. A blob is dropped once it has gone unmatched for
  longer than its persistence time.
- `meatbags.filter.Filter` and `meatbags.filter.Filters`: editable polygons in
  metres. A filter can be a region or a mask (`mask`), and it can be switched
  off (`is_active`). `check_blobs()` records whether a blob is inside and how
  far the nearest one is from the polygon's centroid.
- `meatbags.osc.OscSender` and `meatbags.osc.OscSenders`: OSC 1.0 over UDP.
  A sender sends `/blob` and `/blobsActive` when `send_blobs_active` is set,
  `/filter` when `send_filters_active` is set, and `/connectionStatus`,
  `/generalStatus` and `/laserStatus` (only on change) when `send_logs_active`
  is set. `encode_message()` builds the raw message bytes.
- `meatbags.interfaces.InterfaceSelector`: lists the IPv4 addresses of the
  local network interfaces, labelled `"name: address"`, so that a sensor
  connection can be bound to one of them with `set_interface_and_ip()`.
- `meatbags.draggable.DraggablePoint`, `meatbags.ui.UI`, `meatbags.ui.UIButton`
  and `meatbags.ui.BoundedCount`: mouse interaction state for handles and for
  the add, remove and save buttons, with counts kept within their limits.

## Example

```python
from meatbags.filter import Filter, Filters
from meatbags.hokuyo import Hokuyo
from meatbags.osc import OscSender, OscSenders
from meatbags.sensors import Sensors
from meatbags.tracker import BlobTracker

filters = Filters()
area = Filter(0, 4)
area.points = [(-2.0, 0.0), (2.0, 0.0), (2.0, 4.0), (-2.0, 4.0)]
filters.add_filter(area)

sensors = Sensors(filters)
sensor = Hokuyo("192.168.0.10", 10940)
sensor.connect()
sensors.add_sensor(sensor)

tracker = BlobTracker(blob_persistence=1.0, epsilon=100.0, min_points=2,
                      max_coordinates=1440)

sender = OscSender("127.0.0.1", 5322)
sender.send_blobs_active = True
sender.send_filters_active = True
senders = OscSenders()
senders.add_osc_sender(sender)

def frame(elapsed):
    sensors.update(elapsed)
    filters.update()
    tracker.update(elapsed)
    if sensors.new_coordinates_available():
        coordinates, intensities = sensors.coordinates_and_intensities()
        tracker.set_coordinates(coordinates, intensities)
        tracker.update_blobs()
    blobs = tracker.blobs()
    filters.check_blobs(blobs)
    senders.send(blobs, sensors, filters)
```

Call `frame` once per tick with the seconds elapsed since the last tick.
Sensor coordinates and blob centroids are in millimetres. Filter vertices and
OSC positions are in metres.

## What it does not do

meatbags is a library. It has no command to run, opens no window and draws
nothing: the mouse handlers (`on_mouse_moved` and friends) only update state
from screen coordinates you pass in, and the screen mapping is set with
`set_space()`. It does not store settings either; the save button only calls
the `on_save` callback given to `UI`.