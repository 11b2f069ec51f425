"""Service definition file templates for the supported init systems."""

SYSTEMD_SERVICE_TEMPLATE = """[Unit]
Description={description}
After=network.target

[Service]
Type=simple
ExecStart={path}
Restart=on-failure
RestartSec=5

[Install]
WantedBy=multi-user.target
"""

# Parsed by upstart's init(8); keep the layout exactly as is.
UPSTART_CONF_TEMPLATE = """
description "{name}, {description}"

start on runlevel [2345]
stop on runlevel [!2345]

respawn
pre-start exec sleep 1
exec {path}
"""

SYSV_INIT_SCRIPT_TEMPLATE = """#!/bin/sh
#
#       /etc/init.d/{name}
#
# chkconfig: 2345 87 17
# description: {description}

### BEGIN INIT INFO
# Provides:          {name}
# Required-Start:    $network $remote_fs
# Required-Stop:     $network $remote_fs
# Default-Start:     2 3 4 5
# Default-Stop:      0 1 6
# Short-Description: {description}
# Description:       {description}
### END INIT INFO

exec="{path}"
servname="{description}"
proc="{name}"
pidfile="/var/run/$proc.pid"
stdoutlog="/var/log/$proc.log"
stderrlog="/var/log/$proc.err"

is_running() {{
    [ -s "$pidfile" ] && [ -d "/proc/$(cat "$pidfile")" ]
}}

start() {{
    [ -x "$exec" ] || exit 5
    if is_running; then
        echo "$proc is already running (pid $(cat "$pidfile"))"
        return 0
    fi
    printf "Starting %s:\\n" "$servname"
    "$exec" >> "$stdoutlog" 2>> "$stderrlog" &
    echo $! > "$pidfile"
}}

stop() {{
    if ! is_running; then
        echo "$proc is not running"
        rm -f "$pidfile"
        return 1
    fi
    printf "Stopping %s:\\n" "$servname"
    kill "$(cat "$pidfile")" && rm -f "$pidfile"
}}

status() {{
    if is_running; then
        echo "$proc is running (pid $(cat "$pidfile"))"
        return 0
    fi
    if [ -f "$pidfile" ]; then
        echo "$proc is dead but pid file exists"
        return 1
    fi
    echo "$proc is stopped"
    return 3
}}

case "$1" in
    start)
        start
        ;;
    stop)
        stop
        ;;
    restart)
        stop
        start
        ;;
    status)
        status
        ;;
    *)
        echo "Usage: $0 {{start|stop|restart|status}}"
        exit 2
        ;;
esac
exit $?
"""
