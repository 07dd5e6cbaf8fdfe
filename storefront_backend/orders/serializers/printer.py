from rest_framework import serializers

from orders.models import PrinterSetting


class PrinterSettingSerializer(serializers.ModelSerializer):
    class Meta:
        model = PrinterSetting
        fields = [
            "id",
            "printer_name",
            "printer_address",
            "connection_type",
            "is_default",
            "created_at",
        ]
        read_only_fields = ["id", "created_at"]

    def validate_printer_name(self, value):
        value = (value or "").strip()
        if not value:
            raise serializers.ValidationError("Printer name is required.")
        return value

    def validate(self, attrs):
        connection_type = attrs.get(
            "connection_type",
            getattr(self.instance, "connection_type", PrinterSetting.CONNECTION_USB),
        )
        address = attrs.get("printer_address", getattr(self.instance, "printer_address", ""))
        if connection_type == PrinterSetting.CONNECTION_NETWORK and not (address or "").strip():
            raise serializers.ValidationError(
                {"printer_address": "Network printers need a print server address."}
            )
        return attrs
